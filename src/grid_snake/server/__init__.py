"""FastAPI host that runs games and streams frames to clients."""
