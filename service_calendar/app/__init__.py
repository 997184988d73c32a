"""
Calendar API Service package.

The service fronts the calendar controllers with an access gate enforcing:
- Authentication: a single HTTP Basic username/passcode pair
- Network restriction: callers must come from a configured set of IPv4 ranges

Structure:
- app.main: FastAPI app, routes, and middleware wiring.
- app.access: Access policy, gate and middleware.
- app.controllers: Versioned API controllers and versioning helpers.
"""
