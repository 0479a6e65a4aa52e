import uvicorn

from fittransfer.config import server_settings

if __name__ == "__main__":
    uvicorn.run(
        "fittransfer.main:app",
        host=server_settings.host,
        port=server_settings.port,
        log_level=server_settings.log_level.lower(),
    )
