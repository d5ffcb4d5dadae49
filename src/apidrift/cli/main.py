import uvicorn

from apidrift.config import get_settings


def main():
    settings = get_settings()
    uvicorn.run(
        "apidrift.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.reload,
    )
