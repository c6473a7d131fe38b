"""LifeFlow API - task/event mutations and push subscription endpoints."""
