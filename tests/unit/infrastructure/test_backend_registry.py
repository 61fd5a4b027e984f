"""Tests for the backend registry and its config-driven factory."""

from __future__ import annotations

import httpx
import pytest

from episodarr.domain.entities import BackendNotFound
from episodarr.domain.ports import BackendRegistryPort
from episodarr.infrastructure.config.schema import AppConfig, BackendConfig
from episodarr.infrastructure.extractors.direct_link import DirectLinkBackend
from episodarr.infrastructure.extractors.embedded_player import EmbeddedPlayerBackend
from episodarr.infrastructure.extractors.registry import (
    BackendRegistry,
    create_backend,
    create_registry,
)


class TestBackendRegistry:
    def test_lookup_and_order(self, fake_backend) -> None:
        a, b = fake_backend("alpha"), fake_backend("beta")
        registry = BackendRegistry([a, b])
        assert registry.get("beta") is b
        assert registry.names == ["alpha", "beta"]
        assert list(registry) == [a, b]

    def test_unknown_name(self, fake_backend) -> None:
        registry = BackendRegistry([fake_backend("alpha")])
        with pytest.raises(BackendNotFound) as exc_info:
            registry.get("gamma")
        assert exc_info.value.available == ["alpha"]

    def test_duplicate_names_rejected(self, fake_backend) -> None:
        with pytest.raises(ValueError, match="Duplicate"):
            BackendRegistry([fake_backend("alpha"), fake_backend("alpha")])

    def test_mapping_is_read_only(self, fake_backend) -> None:
        registry = BackendRegistry([fake_backend("alpha")])
        with pytest.raises(TypeError):
            registry._backends["beta"] = fake_backend("beta")  # type: ignore[index]

    def test_satisfies_port(self) -> None:
        assert isinstance(BackendRegistry([]), BackendRegistryPort)


class TestCreateBackend:
    def test_direct_link(self) -> None:
        definition = BackendConfig(
            name="gogocdn",
            strategy="direct_link",
            listing_url="https://anime.example/{episode_ref}",
            embed_selectors=[{"selector": "iframe[src]", "attr": "src"}],
        )
        backend = create_backend(definition, httpx.AsyncClient())
        assert isinstance(backend, DirectLinkBackend)
        assert backend.name == "gogocdn"

    def test_embedded_player(self) -> None:
        definition = BackendConfig(
            name="player",
            strategy="embedded_player",
            embed_url="https://p.example/e/{episode_ref}",
        )
        assert isinstance(
            create_backend(definition, httpx.AsyncClient()), EmbeddedPlayerBackend
        )

    def test_default_config_registry(self) -> None:
        registry = create_registry(AppConfig().backends, httpx.AsyncClient())
        assert registry.names == ["gogocdn", "streamwish"]
