"""Azure Functions entry point for the Forecourt Stock Orchestrator."""
import azure.functions as func

from src.api.main import app as fastapi_app

# Every HTTP route of the FastAPI app (/health, /stock/create) is served through
# the Functions host; the function key guards the whole surface.
app = func.AsgiFunctionApp(app=fastapi_app, http_auth_level=func.AuthLevel.FUNCTION)
