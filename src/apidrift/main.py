from dotenv import load_dotenv
load_dotenv()

from fastapi import FastAPI
from apidrift.api.routes.compare import router as compare_router
from apidrift.logging_config import configure_logging
from prometheus_fastapi_instrumentator import Instrumentator
from apidrift.tracing import configure_tracing
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor

# ------------------------------------------------------------------
# Configure Observability
# ------------------------------------------------------------------
configure_logging()
configure_tracing()

app = FastAPI(title="apidrift")

app.include_router(compare_router)

# ------------------------------------------------------------------
# Observability
# ------------------------------------------------------------------
FastAPIInstrumentor.instrument_app(app)
Instrumentator().instrument(app).expose(app)

# ------------------------------------------------------------------
# Health Check
# ------------------------------------------------------------------
@app.get("/health")
def health_check():
    return {"status": "ok"}
