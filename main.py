import uvicorn

if __name__ == "__main__":
    uvicorn.run(
        "src.main.web:app",
        host="0.0.0.0",
        port=5000,
        proxy_headers=False,
    )
