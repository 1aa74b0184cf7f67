"""Tests for routecheck.resolve — controller resolution by path convention."""

from pathlib import Path

from routecheck.config import CheckConfig
from routecheck.context import CheckContext
from routecheck.model import AppModel, ControllerInfo
from routecheck.resolve import (
    APPLICATION_CONTROLLER,
    controller_exists,
    controller_from_ruby_file,
    controller_from_view_file,
    controller_name_from_ruby_file,
    controller_name_from_view_file,
)


def _exists(*names: str):
    known = set(names)
    return lambda name: name in known


class TestControllerNameFromViewFile:
    """Walk from the most specific namespace up to ``application``."""

    def test_exact_controller(self) -> None:
        name = controller_name_from_view_file(
            "app/views/admin/users/index.html.erb", _exists("admin/users", "admin"),
        )
        assert name == "admin/users"

    def test_walks_up_to_namespace(self) -> None:
        name = controller_name_from_view_file(
            "app/views/admin/users/index.html.erb", _exists("admin"),
        )
        assert name == "admin"

    def test_falls_back_to_application(self) -> None:
        name = controller_name_from_view_file("app/views/admin/users/index.html.erb", _exists())
        assert name == APPLICATION_CONTROLLER

    def test_top_level_view(self) -> None:
        name = controller_name_from_view_file("app/views/index.html.erb", _exists("views"))
        assert name == "application"

    def test_partial_in_nested_directory(self) -> None:
        name = controller_name_from_view_file(
            "app/views/users/shared/_form.html.erb", _exists("users"),
        )
        assert name == "users"

    def test_other_app_subdirectory(self) -> None:
        name = controller_name_from_view_file(
            "app/components/users/card.html.erb", _exists("users"),
        )
        assert name == "users"

    def test_no_app_segment(self) -> None:
        assert controller_name_from_view_file("views/users/a.erb", _exists("users")) == "application"


class TestControllerNameFromRubyFile:
    def test_existing_controller(self) -> None:
        name = controller_name_from_ruby_file(
            "app/controllers/admin/users_controller.rb", _exists("admin/users"),
        )
        assert name == "admin/users"

    def test_missing_controller_file(self) -> None:
        name = controller_name_from_ruby_file("app/controllers/admin/users_controller.rb", _exists())
        assert name == "application"

    def test_non_controller_file(self) -> None:
        name = controller_name_from_ruby_file(
            "app/controllers/concerns/paginated.rb", _exists("concerns/paginated"),
        )
        assert name == "application"


class TestControllerExists:
    def test_file_present(self, write_tree) -> None:
        root = write_tree({"app/controllers/admin/users_controller.rb": ""})
        assert controller_exists(root, "admin/users")

    def test_file_absent(self, tmp_path: Path) -> None:
        assert not controller_exists(tmp_path, "admin/users")

    def test_directory_is_not_a_controller(self, tmp_path: Path) -> None:
        (tmp_path / "app/controllers/users_controller.rb").mkdir(parents=True)
        assert not controller_exists(tmp_path, "users")

    def test_empty_name(self, tmp_path: Path) -> None:
        assert not controller_exists(tmp_path, None)
        assert not controller_exists(tmp_path, "")


def _context(root: Path, names: list[str], ignored: frozenset[str] = frozenset()) -> CheckContext:
    model = AppModel(controller_information={n: ControllerInfo(helpers=frozenset({n})) for n in names})
    return CheckContext.build(CheckConfig(root=root, ignored_controllers=ignored), model)


class TestResolveAgainstDisk:
    """Resolution reads disk state and returns filtered controller info."""

    def test_view_resolves_nested_controller(self, write_tree) -> None:
        root = write_tree({
            "app/controllers/application_controller.rb": "",
            "app/controllers/admin/users_controller.rb": "",
        })
        ctx = _context(root, ["application", "admin/users"])
        info = controller_from_view_file(ctx, "app/views/admin/users/index.html.erb")
        assert info is not None
        assert info.helpers == {"admin/users"}

    def test_view_walks_up_to_namespace(self, write_tree) -> None:
        root = write_tree({"app/controllers/admin_controller.rb": ""})
        ctx = _context(root, ["application", "admin"])
        info = controller_from_view_file(ctx, "app/views/admin/users/index.html.erb")
        assert info is not None
        assert info.helpers == {"admin"}

    def test_view_falls_back_to_application(self, tmp_path: Path) -> None:
        ctx = _context(tmp_path, ["application", "admin/users"])
        info = controller_from_view_file(ctx, "app/views/admin/users/index.html.erb")
        assert info is not None
        assert info.helpers == {"application"}

    def test_model_entry_without_file_is_not_resolved(self, tmp_path: Path) -> None:
        """Existence comes from disk, never from the model alone."""
        ctx = _context(tmp_path, ["application", "users"])
        info = controller_from_ruby_file(ctx, "app/controllers/users_controller.rb")
        assert info is not None
        assert info.helpers == {"application"}

    def test_ignored_controller_on_disk_resolves_to_none(self, write_tree) -> None:
        """An ignored controller that exists on disk stops the walk: no info."""
        root = write_tree({"app/controllers/admin/users_controller.rb": ""})
        ctx = _context(root, ["application", "admin/users"], ignored=frozenset({"admin/users"}))
        assert controller_from_view_file(ctx, "app/views/admin/users/index.html.erb") is None
        assert controller_from_ruby_file(ctx, "app/controllers/admin/users_controller.rb") is None

    def test_ignored_application_resolves_to_none(self, tmp_path: Path) -> None:
        ctx = _context(tmp_path, ["application"], ignored=frozenset({"application"}))
        assert controller_from_view_file(ctx, "app/views/home/index.html.erb") is None
