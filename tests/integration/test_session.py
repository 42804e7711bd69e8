# tests/integration/test_session.py
"""
Integration Tests for Session runs on disk

Covers the full flow: loading packs, building the tag registry, guarding
nodest destinations, and applying steps with imports.
"""

import pytest

from custodian.errors import InvalidManifest, UnknownStepType
from custodian.executor import Action
from custodian.manifests import ManifestLoader
from custodian.session import Session, build_registry


# =============================================================================
# FIXTURES
# =============================================================================

@pytest.fixture
def project(tmp_path):
    """Destination from the canonical copy/xcopy/arg/template scenario."""
    proj = tmp_path / "proj"
    proj.mkdir()
    (proj / "a.txt").write_text("alpha")
    (proj / "t.tmpl").write_text("name={{ name }}")
    (proj / "Custodianfile").write_text(
        '{:steps [(copy "a.txt") (xcopy "a.txt") '
        '(arg "name" "x") (template "t.tmpl" "t.out")]}'
    )
    return proj


@pytest.fixture
def lib_pack(tmp_path):
    """A reusable pack guarded with nodest."""
    lib = tmp_path / "lib"
    lib.mkdir()
    (lib / "LICENSE.tmpl").write_text("{{ license }} {{ owner }}")
    (lib / "setup.cfg").write_text("[metadata]\n")
    (lib / "Custodianfile").write_text(
        '{:name "lib" :nodest true '
        ':steps [(arg "license" "MIT") (arg "owner" "nobody") '
        '(xcopy "setup.cfg") (template "LICENSE.tmpl" "LICENSE")]}'
    )
    return lib


def _snapshot(root):
    return {
        str(p.relative_to(root)): p.read_bytes()
        for p in sorted(root.rglob("*"))
        if p.is_file()
    }


# =============================================================================
# SCENARIOS
# =============================================================================

class TestSession:
    """End-to-end runs of the session driver."""

    @pytest.mark.asyncio
    async def test_canonical_scenario(self, project, tmp_path, caplog):
        caplog.set_level("INFO", logger="custodian")
        empty_pack = tmp_path / "empty"
        empty_pack.mkdir()

        context = await Session().run([str(empty_pack)], str(project))

        assert dict(context) == {"name": "x"}
        assert (project / "t.out").read_text() == "name=x"
        assert any("No Custodianfile found at" in m for m in caplog.messages)

    @pytest.mark.asyncio
    async def test_conditional_steps_are_idempotent(self, project, lib_pack):
        project_file = project / "Custodianfile"
        project_file.write_text('{:steps [(xcopy "a.txt" "b.txt") (from "lib")]}')

        first = Session()
        await first.run([str(lib_pack)], str(project))
        (project / "setup.cfg").write_text("edited")
        before = _snapshot(project)

        second = Session()
        await second.run([str(lib_pack)], str(project))

        assert _snapshot(project) == before
        assert Action(kind="SKIP", dest="b.txt") in second.actions
        assert Action(kind="SKIP", dest="setup.cfg") in second.actions
        assert Action(kind="COPY", src="a.txt", dest="b.txt") in first.actions

    @pytest.mark.asyncio
    async def test_xcopy_after_copy_skips(self, project, caplog):
        caplog.set_level("INFO", logger="custodian")

        session = Session()
        await session.run([], str(project))

        assert session.actions[:2] == [
            Action(kind="COPY", src="a.txt", dest="a.txt"),
            Action(kind="SKIP", dest="a.txt"),
        ]
        assert "SKIP\ta.txt" in caplog.messages

    @pytest.mark.asyncio
    async def test_outer_args_override_pack_defaults(self, project, lib_pack):
        (project / "Custodianfile").write_text(
            '{:steps [(arg "license" "Apache-2.0") (from "lib")]}'
        )

        context = await Session().run([str(lib_pack)], str(project))

        assert (project / "LICENSE").read_text() == "Apache-2.0 nobody"
        assert (project / "setup.cfg").read_text() == "[metadata]\n"
        assert context["license"] == "Apache-2.0"

    @pytest.mark.asyncio
    async def test_nodest_destination_writes_nothing(self, lib_pack, caplog):
        caplog.set_level("INFO", logger="custodian")
        before = _snapshot(lib_pack)

        result = await Session().run([], str(lib_pack))

        assert result is None
        assert _snapshot(lib_pack) == before
        assert any("nodest" in m for m in caplog.messages)

    @pytest.mark.asyncio
    async def test_missing_destination_manifest(self, tmp_path, caplog):
        caplog.set_level("INFO", logger="custodian")

        assert await Session().run([], str(tmp_path)) is None
        assert "Nothing to do here..." in caplog.messages

    @pytest.mark.asyncio
    async def test_unresolved_import_is_tolerated(self, project):
        (project / "Custodianfile").write_text(
            '{:steps [(from "nowhere") (arg "name" "y") (template "t.tmpl" "t.out")]}'
        )

        await Session().run([], str(project))

        assert (project / "t.out").read_text() == "name=y"

    @pytest.mark.asyncio
    async def test_self_importing_pack_terminates(self, tmp_path):
        pack = tmp_path / "pack"
        proj = tmp_path / "proj"
        pack.mkdir()
        proj.mkdir()
        (pack / "f.txt").write_text("f")
        (pack / "Custodianfile").write_text(
            '{:name "loop" :steps [(copy "f.txt") (from "loop")]}'
        )
        (proj / "Custodianfile").write_text('{:steps [(from "loop")]}')

        session = Session()
        await session.run([str(pack)], str(proj))

        assert (proj / "f.txt").read_text() == "f"
        assert [a.kind for a in session.actions] == ["FROM", "COPY", "FROM"]

    @pytest.mark.asyncio
    async def test_invalid_pack_manifest_aborts(self, project, tmp_path):
        bad = tmp_path / "bad"
        bad.mkdir()
        (bad / "Custodianfile").write_text('{:name "bad"}')

        with pytest.raises(InvalidManifest):
            await Session().run([str(bad)], str(project))

        assert not (project / "t.out").exists()

    @pytest.mark.asyncio
    async def test_unknown_step_aborts(self, project):
        (project / "Custodianfile").write_text('{:steps [(copy "a.txt" "b.txt") (chmod "a")]}')

        with pytest.raises(UnknownStepType):
            await Session().run([], str(project))

        assert not (project / "b.txt").exists()

    @pytest.mark.asyncio
    async def test_failure_keeps_earlier_effects(self, project):
        (project / "Custodianfile").write_text(
            '{:steps [(copy "a.txt" "b.txt") (copy "missing.txt") (copy "a.txt" "c.txt")]}'
        )

        with pytest.raises(FileNotFoundError):
            await Session().run([], str(project))

        assert (project / "b.txt").exists()
        assert not (project / "c.txt").exists()


class TestRegistry:
    """Test building the tag registry from import roots."""

    @pytest.mark.asyncio
    async def test_first_import_root_wins(self, tmp_path):
        roots = []
        for label in ("first", "second"):
            root = tmp_path / label
            root.mkdir()
            (root / "Custodianfile").write_text('{:name "shared" :steps []}')
            roots.append(str(root))

        manifests = await ManifestLoader().load_many(roots)
        registry = build_registry(manifests)

        assert list(registry) == ["shared"]
        assert registry["shared"].root.endswith("first")

    def test_absent_manifests_are_ignored(self):
        assert dict(build_registry([None, None])) == {}
