import libcst as cst

from killswitch_graduator.workspace.references import build_alias_map, expand_name, find_references

FLAGS = """
    from killswitch import KillSwitch


    def is_checkout_disabled():
        return KillSwitch.is_activated("3fa85f64-5717-4562-b3fc-2c963f66afa6", "2023-01-01")
"""


def _call_sites(project, symbol="is_checkout_disabled"):
    flags = project.get_source_file("app/flags.py")
    references = find_references(project, flags, symbol)
    sites = []
    for reference in references:
        parent = reference.source_file.parents().get(reference.node)
        if isinstance(parent, cst.Call) and parent.func is reference.node:
            sites.append((reference.source_file.module_name, reference.source_file.module.code_for_node(parent)))
    return sorted(sites)


def test_direct_and_aliased_imports(make_project):
    project = make_project({
        "app/__init__.py": "",
        "app/flags.py": FLAGS,
        "app/direct.py": """
            from app.flags import is_checkout_disabled

            is_checkout_disabled()
        """,
        "app/aliased.py": """
            from app.flags import is_checkout_disabled as checkout_off

            checkout_off()
        """,
        "app/module_alias.py": """
            import app.flags as f

            f.is_checkout_disabled()
        """,
    })
    assert _call_sites(project) == [
        ("app.aliased", "checkout_off()"),
        ("app.direct", "is_checkout_disabled()"),
        ("app.module_alias", "f.is_checkout_disabled()"),
    ]


def test_relative_import(make_project):
    project = make_project({
        "app/__init__.py": "",
        "app/flags.py": FLAGS,
        "app/views/__init__.py": "",
        "app/views/cart.py": """
            from ..flags import is_checkout_disabled

            def render():
                return is_checkout_disabled()
        """,
    })
    assert _call_sites(project) == [("app.views.cart", "is_checkout_disabled()")]


def test_reexport_through_package(make_project):
    project = make_project({
        "app/__init__.py": """
            from .flags import is_checkout_disabled as checkout_off
        """,
        "app/flags.py": FLAGS,
        "service.py": """
            from app import checkout_off

            checkout_off()
        """,
    })
    assert _call_sites(project) == [("service", "checkout_off()")]


def test_calls_inside_the_declaring_module(make_project):
    project = make_project({
        "app/__init__.py": "",
        "app/flags.py": FLAGS + """

    def gate():
        return not is_checkout_disabled()
""",
    })
    assert _call_sites(project) == [("app.flags", "is_checkout_disabled()")]


def test_shadowing_and_member_access_are_not_references(make_project):
    project = make_project({
        "app/__init__.py": "",
        "app/flags.py": FLAGS,
        "app/other.py": """
            def run(is_checkout_disabled, obj):
                is_checkout_disabled()
                obj.is_checkout_disabled()
        """,
        "app/local.py": """
            def is_checkout_disabled():
                return True

            is_checkout_disabled()
        """,
    })
    assert _call_sites(project) == []


def test_non_call_references_are_still_found(make_project):
    project = make_project({
        "app/__init__.py": "",
        "app/flags.py": FLAGS,
        "app/hooks.py": """
            from app.flags import is_checkout_disabled

            callback = is_checkout_disabled
            register(is_checkout_disabled)
        """,
    })
    flags = project.get_source_file("app/flags.py")
    hooks = project.get_source_file("app/hooks.py")
    references = [r for r in find_references(project, flags, "is_checkout_disabled") if r.source_file is hooks]

    assert len(references) >= 2
    assert _call_sites(project) == []


def test_src_layout_module_names(make_project):
    project = make_project({
        "src/app/__init__.py": "",
        "src/app/flags.py": FLAGS,
        "src/app/checkout.py": """
            from app.flags import is_checkout_disabled

            is_checkout_disabled()
        """,
    })
    flags = project.get_source_file("src/app/flags.py")
    assert flags.module_name == "app.flags"

    references = find_references(project, flags, "is_checkout_disabled")
    assert any(r.source_file.module_name == "app.checkout" for r in references)


def test_expand_name_follows_chains_and_prefixes():
    aliases = {
        "pkg.check": {"pkg.impl.check"},
        "api.check": {"pkg.check"},
        "api.flags": {"pkg.flags"},
    }
    assert expand_name("api.check", aliases) == {"api.check", "pkg.check", "pkg.impl.check"}
    assert "pkg.flags.is_x" in expand_name("api.flags.is_x", aliases)


def test_build_alias_map_skips_star_imports(make_project):
    project = make_project({
        "app/__init__.py": """
            from .flags import *
            from .flags import is_checkout_disabled as off
        """,
        "app/flags.py": FLAGS,
    })
    aliases = build_alias_map(project)
    assert aliases["app.off"] == {"app.flags.is_checkout_disabled"}
    assert not any(key.endswith("*") for key in aliases)
