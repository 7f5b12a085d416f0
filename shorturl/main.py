import logging

import uvicorn
from fastapi import Depends, FastAPI, Request, status
from fastapi.responses import JSONResponse, RedirectResponse
from pydantic import ValidationError
from starlette.requests import ClientDisconnect

from .settings import settings
from .models import ShortenRequest, ShortenResponse, URLCollection
from .errors import BodyReadError, MalformedJSON, ShortenerError
from .shortener import Shortener
from .logging_config import setup_logging


logger = logging.getLogger("url_shortener")

SUCCESS_MESSAGE = "short url generated for the provided URL"


def get_shortener(request: Request) -> Shortener:
    return request.app.state.shortener


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(ShortenerError)
    async def shortener_error_handler(request: Request, exc: ShortenerError):
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})

    # last line of defence: one failing request must not take the server down
    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.error("unhandled_exception path=%s", request.url.path, exc_info=exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "Internal server error"},
        )


def create_app() -> FastAPI:
    setup_logging()

    app = FastAPI(title="URL Shortener", version="0.1.0")
    app.state.shortener = Shortener()
    register_error_handlers(app)

    @app.post(
        "/getShortUrl",
        response_model=ShortenResponse,
        status_code=status.HTTP_202_ACCEPTED,
    )
    async def get_short_url(
        request: Request, shortener: Shortener = Depends(get_shortener)
    ) -> ShortenResponse:
        try:
            body = await request.body()
        except ClientDisconnect:
            logger.warning("body_read_failed path=%s", request.url.path)
            raise BodyReadError()

        try:
            payload = ShortenRequest.model_validate_json(body)
        except ValidationError as exc:
            logger.info("malformed_json errors=%s", exc.error_count())
            raise MalformedJSON()

        link = shortener.create(payload.url, host=request.headers.get("host", ""))
        return ShortenResponse(
            Code=status.HTTP_202_ACCEPTED,
            Message=SUCCESS_MESSAGE,
            Response=URLCollection(ActualURL=link.target, ShortURL=link.short_url),
        )

    @app.get("/{code}", status_code=status.HTTP_303_SEE_OTHER)
    def redirect(code: str, shortener: Shortener = Depends(get_shortener)):
        target = shortener.resolve(code)
        return RedirectResponse(url=target, status_code=status.HTTP_303_SEE_OTHER)

    return app


app = create_app()


def run() -> None:
    logger.info("starting webserver on http://localhost:%s ...", settings.port)
    # uvicorn reports a failed bind through sys.exit(1)
    try:
        uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())
    except (Exception, SystemExit) as exc:
        logger.error("could not start the http server %s", exc)
        raise SystemExit(1)


if __name__ == "__main__":
    run()
