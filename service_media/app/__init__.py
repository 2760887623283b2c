"""
Media API service package for the Anime & Media API.

The service exposes anime, video and placeholder media utility endpoints,
enforcing:
- Rate limiting: fixed-window budget per client address
- Caching: in-process TTL cache for upstream-backed routes
- A uniform success/error envelope on every response

Structure:
- app.main: FastAPI app, system routes, and catalog registration.
- app.adapters: HTTP clients for the Jikan and Invidious upstreams.
- app.caching: TTL cache and route-aware cache manager.
- app.ratelimit: Fixed-window limiter and client identity middleware.
- app.domain: The request pipeline every catalog route runs through.
- app.routes: Route definitions grouped by feature area.
"""
