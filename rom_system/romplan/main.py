from fastapi import FastAPI
from romplan.api.routes import router
from romplan.core.config import settings
from romplan.db.session import init_db
from romplan.llm.router import make_http_client
from romplan.pipeline.planner import build_pipeline


app = FastAPI(title="ROM Plan API", version="0.1.0")
app.include_router(router, prefix="/v1")

@app.on_event("startup")
async def on_startup():
    await init_db()
    app.state.http_client = make_http_client(settings)
    app.state.pipeline = build_pipeline(settings, app.state.http_client)

@app.on_event("shutdown")
async def on_shutdown():
    await app.state.http_client.aclose()
