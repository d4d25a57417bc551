"""FastAPI application wiring: factory, lifespan, routers, error handlers."""
