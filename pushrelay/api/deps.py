from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request

from pushrelay.core.config import Settings
from pushrelay.services.relay import PushRelay


def get_relay(request: Request) -> PushRelay:
    return request.app.state.relay


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


RelayDep = Annotated[PushRelay, Depends(get_relay)]
SettingsDep = Annotated[Settings, Depends(get_app_settings)]
