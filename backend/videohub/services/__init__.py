"""Application services: orchestration over units of work and ports."""
