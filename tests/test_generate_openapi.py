import json

from task_api.generate_openapi import generate_openapi


def test_writes_schema_with_task_paths_and_tags(tmp_path):
    out = generate_openapi(str(tmp_path / "interfaces" / "openapi.json"))
    with open(out, encoding="utf-8") as f:
        schema = json.load(f)

    assert "/api/tasks" in schema["paths"]
    assert "/api/tasks/{task_id}" in schema["paths"]
    assert {t["name"] for t in schema["tags"]} >= {"health", "tasks"}
    task_props = schema["components"]["schemas"]["TaskOut"]["properties"]
    assert "isCompleted" in task_props
    assert "completedAt" in task_props


def test_factory_import_does_not_build_the_served_app():
    import sys

    import task_api.application as application

    assert not hasattr(application, "app")
    assert "task_api.main" not in sys.modules
