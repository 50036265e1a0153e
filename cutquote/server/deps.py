from fastapi import Request

from cutquote.services.render_engine import RenderEnginePool


def get_render_pool(request: Request) -> RenderEnginePool:
    """The pool created in the app lifespan."""
    return request.app.state.render_pool
