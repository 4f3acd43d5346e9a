"""
FastAPI task-tracking backend.

HTTP requests are turned into Query/Command objects and routed to their
handlers by `task_api.cqrs.Dispatcher`. Build an app with
`task_api.application.create_app()`.
"""

__version__ = "0.1.0"
