"""Demo Starlette app with a form login strategy.

Usage (from the project root):
    pip install -e ".[examples]"
    python examples/run.py

Then try:
    curl -i http://localhost:8000/private                               # 302 -> /login
    curl -i -d "username=demo&password=demo" http://localhost:8000/login  # 302 -> /private + Set-Cookie
    curl -i -b "__session=<id>" http://localhost:8000/private           # 200
"""

import logging
import os

import uvicorn
from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.requests import Request
from starlette.responses import HTMLResponse, JSONResponse, RedirectResponse
from starlette.routing import Route

from passgate import (
    AuthMiddleware,
    Authenticator,
    AuthorizationError,
    MemorySessionStorage,
    RedirectSignal,
    configure_logging,
    principal_var,
)

DEMO_USERS = {"demo": "demo"}

LOGIN_FORM = """
<form method="post" action="/login">
  <input name="username" placeholder="username">
  <input name="password" type="password" placeholder="password">
  <button>Log in</button>
</form>
"""


class FormStrategy:
    name = "form"

    async def authenticate(self, request, session_storage, options):
        form = await request.form()
        username = form.get("username", "")
        if DEMO_USERS.get(username) != form.get("password"):
            if options.failure_redirect:
                raise RedirectSignal(options.failure_redirect)
            raise AuthorizationError("Invalid username or password")

        user = {"username": username}
        session = await session_storage.get_session(request.headers.get("cookie"))
        session.set(options.session_key, user)
        cookie = await session_storage.commit_session(session)
        if options.success_redirect:
            raise RedirectSignal(options.success_redirect, {"set-cookie": cookie})
        return user


# 1. One authenticator for the whole process
storage = MemorySessionStorage(max_age=3600)
authenticator = Authenticator(storage).use(FormStrategy())


async def login_page(request: Request) -> HTMLResponse:
    await authenticator.is_authenticated(request, success_redirect="/private")
    return HTMLResponse(LOGIN_FORM)


async def login(request: Request) -> HTMLResponse:
    await authenticator.authenticate("form", request, success_redirect="/private")
    return HTMLResponse(LOGIN_FORM)


async def logout(request: Request) -> RedirectResponse:
    session = await storage.get_session(request.headers.get("cookie"))
    cookie = await storage.destroy_session(session)
    return RedirectResponse("/login", status_code=302, headers={"set-cookie": cookie})


async def private(request: Request) -> JSONResponse:
    return JSONResponse({"user": principal_var.get()})


# 2. Wire it into Starlette
app = Starlette(
    routes=[
        Route("/login", login_page, methods=["GET"]),
        Route("/login", login, methods=["POST"]),
        Route("/logout", logout, methods=["POST"]),
        Route("/private", private),
    ],
    middleware=[
        Middleware(
            AuthMiddleware,
            authenticator=authenticator,
            exempt_paths={"/login", "/logout"},
            failure_redirect="/login",
        )
    ],
)

if __name__ == "__main__":
    logging.basicConfig()
    configure_logging(os.environ.get("PASSGATE_LOG_LEVEL", "INFO"))
    uvicorn.run(app, host="127.0.0.1", port=8000)
