"""Backend — Routers."""
