"""Unit tests for the application factory in src.main.

Covers _build_all wiring and create_app route registration.
"""

from __future__ import annotations

from datetime import date
from pathlib import Path

import pytest
from fastapi import FastAPI

from src.config.loader import load_config
from src.config.settings import Settings


def _config(tmp_path: Path, settings: Settings, yaml_text: str = "") -> dict:
    config_file = tmp_path / "config.yaml"
    config_file.write_text(yaml_text)
    return load_config(str(config_file), settings=settings)


class TestBuildAll:
    @pytest.mark.asyncio
    async def test_components(self, tmp_path: Path) -> None:
        from src.main import _build_all

        settings = Settings(
            _env_file=None,
            setlist_fm_key="k",
            export_dpi=600,
            http_timeout=3.0,
            ticket_width_mm=180.0,
        )
        config = _config(
            tmp_path,
            settings,
            "ticket_defaults:\n  venue: Brixton Academy\npreview:\n  max_scale: 1.2\n",
        )

        components = _build_all(settings, config)
        try:
            assert components["http_client"].timeout.read == 3.0
            assert components["search_service"].enabled is True
            assert components["exporter"].dpi == 600
            assert components["renderer"].width_mm == 180.0
            assert components["preview_config"] == {"max_scale": 1.2}
            assert components["provider_registry"]["listing"] is True

            ticket = components["ticket_session"].ticket
            assert ticket.venue == "Brixton Academy"
            assert ticket.artist == "Artist Name"
            assert ticket.date == date.today()
        finally:
            await components["http_client"].aclose()

    @pytest.mark.asyncio
    async def test_export_section_drives_exporter(self, tmp_path: Path) -> None:
        from src.main import _build_all

        settings = Settings(_env_file=None, setlist_fm_key="k")
        config = _config(tmp_path, settings)
        config["export"]["dpi"] = 150

        components = _build_all(settings, config)
        try:
            assert components["exporter"].dpi == 150
            assert components["provider_registry"]["export_dpi"] == 150
        finally:
            await components["http_client"].aclose()

    @pytest.mark.asyncio
    async def test_without_key_listing_is_disabled(self, tmp_path: Path) -> None:
        from src.main import _build_all

        settings = Settings(_env_file=None, setlist_fm_key="")
        components = _build_all(settings, _config(tmp_path, settings))
        try:
            assert components["search_service"].enabled is False
            assert components["provider_registry"]["listing"] is False
        finally:
            await components["http_client"].aclose()


class TestCreateApp:
    def test_routes_registered(self) -> None:
        from src.main import create_app

        application = create_app()

        assert isinstance(application, FastAPI)
        paths = {route.path for route in application.routes}
        for path in (
            "/api/v1/health",
            "/api/v1/concerts/search",
            "/api/v1/concerts/details",
            "/api/v1/ticket",
            "/api/v1/ticket/select",
            "/api/v1/ticket/preview",
            "/api/v1/ticket/export",
            "/api/v1/images/dpi",
        ):
            assert path in paths
