from fastapi import Request

from ..config import Settings
from ..services import Services, TokenAggregator


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_services(request: Request) -> Services:
    """Services built in the application lifespan."""
    return request.app.state.services


def get_aggregator(request: Request) -> TokenAggregator:
    return get_services(request).aggregator
