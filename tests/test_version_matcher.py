import pytest

from modkeeper.exceptions import NoCompatibleVersionError
from modkeeper.models import CompatibilityQuery, ModVersion
from modkeeper.services import VersionMatcher

from conftest import make_version


def versions():
    return [
        ModVersion.from_modrinth(v)
        for v in [
            make_version("a", "0.5.1-1.19.2", ["1.19.2"], ["fabric"]),
            make_version("b", "0.5.1", ["1.19.2", "1.18.2"], ["forge", "neoforge"]),
            make_version("c", "0.5.0", ["1.18.2"], ["fabric", "quilt"]),
            make_version("d", "0.4.9", ["1.18.2"], ["forge"]),
        ]
    ]


def test_hyphen_means_specific_version():
    assert VersionMatcher.is_specific_version("0.5.1-1.19.2")
    assert not VersionMatcher.is_specific_version("1.18.2")
    assert CompatibilityQuery("x", "5.1.0-beta").is_specific_version
    assert CompatibilityQuery("x", "1.20.1").game_version == "1.20.1"
    assert CompatibilityQuery("x", "5.1.0-beta").game_version is None


def test_specific_version_matches_version_number_exactly():
    result = VersionMatcher().filter_compatible(
        versions(), CompatibilityQuery("sodium", "0.5.1-1.19.2", "forge")
    )
    assert [v.id for v in result] == ["a"]
    assert all(v.version_number == "0.5.1-1.19.2" for v in result)


def test_game_version_requires_game_version_and_loader():
    result = VersionMatcher().filter_compatible(
        versions(), CompatibilityQuery("sodium", "1.18.2", "forge")
    )
    assert [v.id for v in result] == ["b", "d"]
    for v in result:
        assert "1.18.2" in v.game_versions
        assert "forge" in v.loaders


def test_registry_order_is_kept():
    result = VersionMatcher().filter_compatible(
        versions(), CompatibilityQuery("sodium", "1.18.2", "fabric")
    )
    assert result[0].version_number == "0.5.0"


@pytest.mark.parametrize(
    "target,loader",
    [
        ("1.20.1", "forge"),
        ("1.19.2", "quilt"),
        ("9.9.9-nope", "forge"),
    ],
)
def test_no_compatible_version(target, loader):
    with pytest.raises(NoCompatibleVersionError) as excinfo:
        VersionMatcher().filter_compatible(
            versions(), CompatibilityQuery("sodium", target, loader)
        )
    assert excinfo.value.context["target"] == target


def test_empty_version_list_is_incompatible():
    with pytest.raises(NoCompatibleVersionError):
        VersionMatcher().filter_compatible([], CompatibilityQuery("x", "1.18.2", "forge"))


def test_missing_loader_never_matches_game_version_query():
    with pytest.raises(NoCompatibleVersionError):
        VersionMatcher().filter_compatible(versions(), CompatibilityQuery("x", "1.18.2"))
