import json
import logging

import pytest

from funhouse.presets_loader import (
    TEMPLATES_DIR,
    list_templates,
    load_scene,
    load_template,
    save_scene,
    scene_from_dict,
)
from funhouse.vector_utils import Point3d, Vector3d


def test_bundled_templates_load():
    templates = list_templates()
    names = [fn for fn, _ in templates]
    assert "funhouse.json" in names
    for fn, display in templates:
        scene = load_template(fn, TEMPLATES_DIR)
        assert scene is not None
        assert scene.name == display


def test_scene_from_dict_builds_spheres_and_curves():
    scene = scene_from_dict({
        "name": "Test",
        "bounds": {"left": -1, "right": 1, "top": 1, "bottom": -1},
        "settings": {"smoothness": 200, "restitution": 0.5},
        "spheres": [{"position": [0.2, 0.1], "radius": 0.3, "velocity": [0.1, -0.1], "color": [300, 0, 10]}],
        "curves": [{"control_points": [[-0.5, 0], [0, 0.5], [0.5, 0]]}],
    })
    assert scene.name == "Test"
    assert scene.settings.smoothness == 200
    assert scene.settings.restitution == 0.5
    body = scene.spheres[0]
    assert body.radius == pytest.approx(0.3)
    assert body.velocity == Vector3d(0.1, -0.1, 0.0)
    assert body.color == (255, 0, 10)
    assert body.settings is scene.settings
    assert scene.curves[0].control_points[1] == Point3d(0, 0.5, 0)
    assert scene.curves[0].settings is scene.settings
    assert scene.selected_sphere is None


def test_bad_entries_are_skipped_with_warning(caplog):
    with caplog.at_level(logging.WARNING, logger="funhouse.presets_loader"):
        scene = scene_from_dict({
            "spheres": [{"radius": 0.2}, {"position": [0, 0]}],
            "curves": [{"control_points": [[0, 0], [1, 1]]}, {"nope": 1}],
        })
    assert len(scene.spheres) == 1
    assert scene.curves == []
    assert len([r for r in caplog.records if r.levelno == logging.WARNING]) == 3


def test_bad_bounds_fall_back_to_default():
    scene = scene_from_dict({"bounds": {"left": 1, "right": -1, "top": 1, "bottom": -1}})
    assert scene.bounds.left == -2.0


def test_unreadable_files_load_as_none(tmp_path):
    assert load_scene(str(tmp_path / "missing.json")) is None
    bad = tmp_path / "bad.json"
    bad.write_text("{not json", encoding="utf-8")
    assert load_scene(str(bad)) is None
    arr = tmp_path / "list.json"
    arr.write_text("[1, 2]", encoding="utf-8")
    assert load_scene(str(arr)) is None


def test_save_then_load(tmp_path):
    scene = load_template("funhouse.json")
    path = tmp_path / "copy.json"
    save_scene(scene, str(path))

    data = json.loads(path.read_text(encoding="utf-8"))
    assert data["name"] == "Funhouse"

    again = load_scene(str(path))
    assert len(again.spheres) == len(scene.spheres)
    for a, b in zip(again.spheres, scene.spheres):
        assert a.position.isclose(b.position)
        assert a.radius == pytest.approx(b.radius)
        assert a.velocity.isclose(b.velocity)
        assert a.color == b.color
    assert again.curves[0].control_points == scene.curves[0].control_points
    assert again.settings == scene.settings


def test_list_templates_in_custom_dir(tmp_path):
    (tmp_path / "a.json").write_text(json.dumps({"name": "Alpha"}), encoding="utf-8")
    (tmp_path / "b.json").write_text(json.dumps({}), encoding="utf-8")
    (tmp_path / "notes.txt").write_text("x", encoding="utf-8")
    assert list_templates(str(tmp_path)) == [("a.json", "Alpha"), ("b.json", "b")]
    assert list_templates(str(tmp_path / "nope")) == []


def test_non_list_sections_are_ignored(tmp_path, caplog):
    path = tmp_path / "odd.json"
    path.write_text(json.dumps({"spheres": None, "curves": 3}), encoding="utf-8")
    with caplog.at_level(logging.WARNING, logger="funhouse.presets_loader"):
        scene = load_scene(str(path))
    assert scene is not None
    assert scene.spheres == []
    assert scene.curves == []
    assert len([r for r in caplog.records if r.levelno == logging.WARNING]) == 2


def test_non_finite_numbers_skip_the_entry(tmp_path):
    # json accepts the NaN/Infinity literals
    path = tmp_path / "nan.json"
    path.write_text(
        '{"spheres": ['
        '{"position": [0, 0], "radius": NaN},'
        '{"position": [Infinity, 0]},'
        '{"position": [0, 0], "velocity": [NaN, 0]},'
        '{"position": [0.5, 0.5], "radius": 0.2}],'
        ' "curves": [{"control_points": [[0, 0], [NaN, 1], [1, 0]]}],'
        ' "bounds": {"left": -Infinity, "right": 2, "top": 1.5, "bottom": -1.5},'
        ' "settings": {"smoothness": NaN}}',
        encoding="utf-8",
    )
    scene = load_scene(str(path))
    assert len(scene.spheres) == 1
    assert scene.spheres[0].radius == pytest.approx(0.2)
    assert scene.curves == []
    assert scene.bounds.left == -2.0
    assert scene.settings.smoothness == 1000.0
