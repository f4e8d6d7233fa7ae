"""Canvas の描画シーケンスをテスト（Renderer スタブ使用）。"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any

import numpy as np
import pytest

from easel.api.canvas import Canvas
from easel.constants import CENTER, CORNERS, DEGREES, HSB, P2D, RADIUS, WEBGL


@dataclass
class StubFramebuffer:
    width: int
    height: int
    color: str = "color-texture"
    depth: str = "depth-texture"
    released: bool = False

    def release(self) -> None:
        self.released = True


@dataclass
class StubShader:
    vertex_source: str
    fragment_source: str
    uniforms: dict[str, Any] = field(default_factory=dict)
    released: bool = False

    def set_uniform(self, name: str, value: Any) -> None:
        self.uniforms[name] = value

    def release(self) -> None:
        self.released = True


@dataclass
class StubRenderer:
    calls: list[tuple] = field(default_factory=list)

    def resize(self, width, height, *, depth) -> None:
        self.calls.append(("resize", width, height, depth))

    def set_target(self, framebuffer) -> None:
        self.calls.append(("set_target", framebuffer))

    def clear(self, color) -> None:
        self.calls.append(("clear", color))

    def fill_triangles(self, vertices, indices, *, color, view_projection) -> None:
        self.calls.append(("fill", vertices, indices, color))

    def lit_triangles(
        self, vertices, normals, indices, *, material, lights, view_projection, camera_position
    ) -> None:
        self.calls.append(("lit", vertices, normals, material, lights, camera_position))

    def shaded_quad(self, shader, vertices, tex_coords) -> None:
        self.calls.append(("shaded_quad", shader, vertices, tex_coords))

    def text(self, text, position, *, rotation, style) -> None:
        self.calls.append(("text", text, position, rotation, style))

    def create_framebuffer(self, width, height) -> StubFramebuffer:
        return StubFramebuffer(width, height)

    def create_shader(self, vertex_source, fragment_source) -> StubShader:
        return StubShader(vertex_source, fragment_source)

    def of(self, kind: str) -> list[tuple]:
        return [c for c in self.calls if c[0] == kind]


def _canvas(mode: str = P2D, size: tuple[int, int] = (720, 400)) -> tuple[Canvas, StubRenderer]:
    renderer = StubRenderer()
    c = Canvas(renderer, display_size=(1280, 720))
    c.create_canvas(size[0], size[1], mode)
    c.begin_frame()
    renderer.calls.clear()
    return c, renderer


def test_create_canvas_resizes_renderer_and_calls_hook() -> None:
    renderer = StubRenderer()
    created: list[tuple[int, int, str]] = []
    c = Canvas(renderer, display_size=(1920, 1080), on_create_canvas=lambda *a: created.append(a))

    assert (c.width, c.height, c.mode) == (100, 100, P2D)
    c.create_canvas(c.window_width, c.window_height, WEBGL)

    assert (c.width, c.height, c.mode) == (1920, 1080, WEBGL)
    assert renderer.calls == [("resize", 1920, 1080, True)]
    assert created == [(1920, 1080, WEBGL)]


def test_create_canvas_rejects_invalid_arguments() -> None:
    c = Canvas(StubRenderer())
    with pytest.raises(ValueError):
        c.create_canvas(0, 100)
    with pytest.raises(ValueError):
        c.create_canvas(100, 100, "svg")


def test_begin_frame_counts_frames_and_resets_matrix() -> None:
    c, renderer = _canvas()
    assert c.frame_count == 1

    c.translate(50, 50)
    c.begin_frame()
    assert c.frame_count == 2

    c.line(0, 0, 10, 0)
    (_, vertices, _, _), = renderer.of("fill")
    assert float(vertices[:, 0].min()) == pytest.approx(0.0)


def test_background_clears_with_parsed_color() -> None:
    c, renderer = _canvas()
    c.background(230)
    (_, color), = renderer.calls
    assert color == pytest.approx((230 / 255, 230 / 255, 230 / 255, 1.0))


def test_rotated_line_is_transformed_by_matrix() -> None:
    c, renderer = _canvas()
    c.angle_mode(DEGREES)
    c.stroke_weight(2)
    c.translate(10, 10)
    c.rotate(90)
    c.line(0, 0, 100, 0)

    (_, vertices, indices, color), = renderer.of("fill")
    assert color == (0.0, 0.0, 0.0, 1.0)
    assert indices.tolist() == [0, 1, 2, 0, 2, 3]
    np.testing.assert_allclose(vertices[:, 0].min(), 9.0, atol=1e-4)
    np.testing.assert_allclose(vertices[:, 0].max(), 11.0, atol=1e-4)
    np.testing.assert_allclose(vertices[:, 1].min(), 10.0, atol=1e-4)
    np.testing.assert_allclose(vertices[:, 1].max(), 110.0, atol=1e-4)


def test_line_without_stroke_draws_nothing() -> None:
    c, renderer = _canvas()
    c.no_stroke()
    c.line(0, 0, 10, 10)
    assert renderer.calls == []


def test_rect_draws_fill_then_stroke() -> None:
    c, renderer = _canvas()
    c.fill(237, 34, 93)
    c.rect(10, 20, 30, 40)

    fills = renderer.of("fill")
    assert len(fills) == 2
    assert fills[0][3] == pytest.approx((237 / 255, 34 / 255, 93 / 255, 1.0))
    assert fills[1][3] == (0.0, 0.0, 0.0, 1.0)
    np.testing.assert_allclose(fills[0][1][:, :2].max(axis=0), [40.0, 60.0])


def test_rect_corners_mode_without_stroke() -> None:
    c, renderer = _canvas()
    c.no_stroke()
    c.rect_mode(CORNERS)
    c.rect(100, 100, 620, 300)

    (_, vertices, _, _), = renderer.of("fill")
    np.testing.assert_allclose(vertices[:, :2].min(axis=0), [100.0, 100.0])
    np.testing.assert_allclose(vertices[:, :2].max(axis=0), [620.0, 300.0])


def test_circle_in_radius_mode_uses_third_argument_as_radius() -> None:
    c, renderer = _canvas()
    c.no_stroke()
    c.ellipse_mode(RADIUS)
    c.circle(50, 60, 24)

    (_, vertices, _, color), = renderer.of("fill")
    assert color == (1.0, 1.0, 1.0, 1.0)
    np.testing.assert_allclose(vertices[0, :2], [50.0, 60.0], atol=1e-4)
    np.testing.assert_allclose(vertices[:, :2].min(axis=0), [26.0, 36.0], atol=1e-4)
    np.testing.assert_allclose(vertices[:, :2].max(axis=0), [74.0, 84.0], atol=1e-4)


def test_modes_reject_unknown_values() -> None:
    c, _ = _canvas()
    with pytest.raises(ValueError):
        c.angle_mode("gradians")
    with pytest.raises(ValueError):
        c.rect_mode("diamond")
    with pytest.raises(ValueError):
        c.ellipse_mode("diamond")
    with pytest.raises(ValueError):
        c.text_align("middle")
    with pytest.raises(ValueError):
        c.text_size(0)
    with pytest.raises(ValueError):
        c.stroke_weight(-1)


def test_hsb_color_mode_applies_to_stroke() -> None:
    c, renderer = _canvas()
    c.color_mode(HSB)
    c.stroke(0, 100, 100)
    c.line(0, 0, 10, 0)
    (_, _, _, color), = renderer.of("fill")
    assert color == pytest.approx((1.0, 0.0, 0.0, 1.0))


def test_push_pop_restores_style_and_matrix() -> None:
    c, renderer = _canvas()
    c.fill(255, 0, 0)
    with c.pushed():
        c.fill(0, 255, 0)
        c.color_mode(HSB)
        c.translate(100, 0)
    c.no_stroke()
    c.rect(0, 0, 10, 10)

    (_, vertices, _, color), = renderer.of("fill")
    assert color == (1.0, 0.0, 0.0, 1.0)
    assert float(vertices[:, 0].min()) == pytest.approx(0.0)
    assert c._color.mode == "rgb"


def test_pop_without_push_raises() -> None:
    c, _ = _canvas()
    with pytest.raises(RuntimeError):
        c.pop()


def test_text_uses_matrix_position_rotation_and_fill() -> None:
    c, renderer = _canvas()
    c.angle_mode(DEGREES)
    c.fill(255)
    c.text_size(20)
    c.text_align(CENTER, CENTER)
    c.translate(100, 50)
    c.rotate(90)
    c.text(30, 10, 0)

    (_, text, position, rotation, style), = renderer.of("text")
    assert text == "30"
    assert position == pytest.approx((100.0, 60.0), abs=1e-4)
    assert rotation == pytest.approx(90.0)
    assert style.size == pytest.approx(20.0)
    assert style.color == (1.0, 1.0, 1.0, 1.0)
    assert (style.align_x, style.align_y) == (CENTER, CENTER)


def test_text_scales_size_and_stroke_weight() -> None:
    c, renderer = _canvas()
    c.scale(2)
    c.stroke_weight(1.5)
    c.text("a", 0, 0)
    (_, _, _, _, style), = renderer.of("text")
    assert style.size == pytest.approx(24.0)
    assert style.stroke == (0.0, 0.0, 0.0, 1.0)
    assert style.stroke_weight == pytest.approx(3.0)


def test_text_outline_uses_current_stroke_color() -> None:
    c, renderer = _canvas()
    c.fill(255)
    c.stroke(255, 0, 0)
    c.text("a", 0, 0)
    (_, _, _, _, style), = renderer.of("text")
    assert style.color == (1.0, 1.0, 1.0, 1.0)
    assert style.stroke == (1.0, 0.0, 0.0, 1.0)
    assert style.stroke_weight == pytest.approx(1.0)

    renderer.calls.clear()
    c.no_stroke()
    c.text("b", 0, 0)
    (_, _, _, _, style), = renderer.of("text")
    assert style.stroke is None
    assert style.stroke_weight == 0.0


def test_text_draws_outline_only_without_fill_and_nothing_without_either() -> None:
    c, renderer = _canvas()
    c.no_fill()
    c.text("a", 0, 0)
    (_, _, _, _, style), = renderer.of("text")
    assert style.color is None
    assert style.stroke == (0.0, 0.0, 0.0, 1.0)

    renderer.calls.clear()
    c.stroke_weight(0)
    c.text("b", 0, 0)
    assert renderer.calls == []

    c.stroke_weight(1)
    c.no_stroke()
    c.text("c", 0, 0)
    assert renderer.calls == []


def test_text_in_webgl_mode_raises() -> None:
    c, _ = _canvas(WEBGL)
    with pytest.raises(RuntimeError):
        c.text("x", 0, 0)


@pytest.mark.parametrize(
    "call",
    [
        lambda c: c.sphere(),
        lambda c: c.rotate_x(1.0),
        lambda c: c.rotate_y(1.0),
        lambda c: c.rotate_z(1.0),
        lambda c: c.ambient_light(100),
        lambda c: c.directional_light(255, 255, 255, 0, 0, -1),
        lambda c: c.ambient_material(255),
        lambda c: c.specular_material(255),
        lambda c: c.create_framebuffer(),
        lambda c: c.shader(object()),
    ],
)
def test_webgl_only_calls_raise_in_p2d(call) -> None:
    c, _ = _canvas(P2D)
    with pytest.raises(RuntimeError):
        call(c)


def test_sphere_without_lights_uses_flat_fill() -> None:
    c, renderer = _canvas(WEBGL)
    c.fill(255, 0, 0)
    c.translate(100, 0, 0)
    c.sphere(10)

    (_, vertices, _, color), = renderer.of("fill")
    assert color == (1.0, 0.0, 0.0, 1.0)
    center = (vertices.min(axis=0) + vertices.max(axis=0)) / 2
    np.testing.assert_allclose(center, [100.0, 0.0, 0.0], atol=1e-3)
    assert renderer.of("lit") == []


def test_sphere_with_lights_passes_material_and_normalized_light() -> None:
    c, renderer = _canvas(WEBGL, size=(800, 600))
    c.ambient_light(100)
    c.directional_light(255, 255, 255, -1, 1, -1)
    c.ambient_material(255, 0, 0)
    c.fill(255, 255, 100)
    c.specular_material(255)
    c.shininess(150)
    c.sphere()

    (_, vertices, normals, material, lights, camera), = renderer.of("lit")
    assert vertices.shape == normals.shape
    np.testing.assert_allclose(np.linalg.norm(normals, axis=1), 1.0, atol=1e-5)
    assert material.fill == pytest.approx((1.0, 1.0, 100 / 255, 1.0))
    assert material.ambient == (1.0, 0.0, 0.0, 1.0)
    assert material.specular == (1.0, 1.0, 1.0, 1.0)
    assert material.shininess == 150.0
    assert lights.enabled
    assert len(lights.ambient) == 1
    assert lights.ambient[0] == pytest.approx((100 / 255, 100 / 255, 100 / 255, 1.0))
    (light,) = lights.directional
    s = 1.0 / math.sqrt(3.0)
    assert light.direction == pytest.approx((-s, s, -s))
    assert camera == pytest.approx((0.0, 0.0, 300.0 / math.tan(math.pi / 6)))


def test_lights_reset_every_frame_and_no_lights() -> None:
    c, renderer = _canvas(WEBGL)
    c.ambient_light(100)
    c.begin_frame()
    c.sphere()
    assert len(renderer.of("fill")) == 1

    renderer.calls.clear()
    c.ambient_light(100)
    c.no_lights()
    c.sphere()
    assert renderer.of("lit") == []


def test_pop_restores_lights_added_after_push() -> None:
    c, renderer = _canvas(WEBGL)
    c.ambient_light(50)
    with c.pushed():
        c.directional_light(255, 255, 255, 0, 0, -1)
        c.ambient_light(100)
        c.sphere()
        (_, _, _, _, lights, _), = renderer.of("lit")
        assert len(lights.ambient) == 2
        assert len(lights.directional) == 1

    renderer.calls.clear()
    c.sphere()
    (_, _, _, _, lights, _), = renderer.of("lit")
    assert len(lights.ambient) == 1
    assert lights.directional == ()


def test_pop_restores_lights_cleared_after_push() -> None:
    c, renderer = _canvas(WEBGL)
    c.ambient_light(50)
    with c.pushed():
        c.no_lights()
    c.sphere()
    assert len(renderer.of("lit")) == 1


def test_lights_added_inside_framebuffer_are_dropped_at_end() -> None:
    c, renderer = _canvas(WEBGL)
    fb = c.create_framebuffer()
    with fb:
        c.ambient_light(100)
        c.directional_light(255, 255, 255, 0, 0, -1)
    renderer.calls.clear()
    c.sphere()
    assert renderer.of("lit") == []
    assert len(renderer.of("fill")) == 1


def test_directional_light_validates_arguments() -> None:
    c, _ = _canvas(WEBGL)
    with pytest.raises(ValueError):
        c.directional_light(0, 0, 1)
    with pytest.raises(ValueError):
        c.directional_light(255, 0, 0, 0)


def test_shininess_is_at_least_one() -> None:
    c, _ = _canvas(WEBGL)
    c.shininess(0.2)
    assert c._style.shininess == 1.0


def test_framebuffer_begin_end_targets_handle_and_restores_state() -> None:
    c, renderer = _canvas(WEBGL, size=(640, 480))
    fb = c.create_framebuffer()
    assert (fb.width, fb.height) == (640, 480)
    assert fb.color == "color-texture"
    assert fb.depth == "depth-texture"

    c.fill(255, 0, 0)
    with fb:
        c.fill(0, 0, 255)
        c.rotate_y(1.0)
        with pytest.raises(RuntimeError):
            fb.begin()
    c.sphere()

    targets = [call[1] for call in renderer.of("set_target")]
    assert targets == [fb.handle, None]
    (_, vertices, _, color), = renderer.of("fill")
    assert color == (1.0, 0.0, 0.0, 1.0)


def test_framebuffer_end_without_begin_raises() -> None:
    c, _ = _canvas(WEBGL)
    fb = c.create_framebuffer()
    with pytest.raises(RuntimeError):
        fb.end()


def test_unbalanced_framebuffer_is_reported_at_end_frame() -> None:
    c, renderer = _canvas(WEBGL)
    fb = c.create_framebuffer()
    fb.begin()
    with pytest.raises(RuntimeError):
        c.end_frame()
    assert renderer.of("set_target")[-1] == ("set_target", None)
    c.begin_frame()


def test_end_frame_without_balance_check_resets_target_silently() -> None:
    c, renderer = _canvas(WEBGL)
    fb = c.create_framebuffer()
    fb.begin()
    c.end_frame(check_balance=False)
    assert renderer.of("set_target")[-1] == ("set_target", None)
    c.begin_frame()


def test_run_frame_reports_unbalanced_begin_after_normal_draw() -> None:
    c, renderer = _canvas(WEBGL)
    fb = c.create_framebuffer()
    with pytest.raises(RuntimeError, match=r"end\(\)"):
        c.run_frame(lambda canvas: fb.begin())
    assert renderer.of("set_target")[-1] == ("set_target", None)


def test_run_frame_keeps_draw_exception_when_framebuffer_is_open() -> None:
    c, renderer = _canvas(WEBGL)
    fb = c.create_framebuffer()

    def draw(canvas: Canvas) -> None:
        fb.begin()
        raise ValueError("draw failed")

    with pytest.raises(ValueError, match="draw failed"):
        c.run_frame(draw)
    assert renderer.of("set_target")[-1] == ("set_target", None)

    frame = c.frame_count
    c.run_frame(lambda canvas: canvas.sphere())
    assert c.frame_count == frame + 1


def test_rect_with_shader_draws_unit_quad() -> None:
    c, renderer = _canvas(WEBGL)
    shader = c.create_shader("vs", "fs")
    assert shader.vertex_source == "vs"

    c.shader(shader)
    c.translate(100, 100)
    c.rect(0, 0, c.width, c.height)

    (_, used, vertices, tex_coords), = renderer.of("shaded_quad")
    assert used is shader
    np.testing.assert_allclose(vertices[:, :2].min(axis=0), [0.0, 0.0])
    np.testing.assert_allclose(vertices[:, :2].max(axis=0), [1.0, 1.0])
    np.testing.assert_allclose(tex_coords, vertices[:, :2])
    assert renderer.of("fill") == []


def test_shader_is_reset_every_frame_and_by_reset_shader() -> None:
    c, renderer = _canvas(WEBGL)
    shader = c.create_shader("vs", "fs")
    c.shader(shader)
    c.reset_shader()
    c.rect(0, 0, 10, 10)
    assert renderer.of("shaded_quad") == []

    c.shader(shader)
    c.begin_frame()
    c.rect(0, 0, 10, 10)
    assert renderer.of("shaded_quad") == []


def test_release_releases_created_gpu_objects() -> None:
    c, _ = _canvas(WEBGL)
    fb = c.create_framebuffer()
    shader = c.create_shader("vs", "fs")
    c.release()
    assert fb.handle.released
    assert shader.released


def test_mouse_and_previous_mouse_positions() -> None:
    c, _ = _canvas()
    c.mouse.move_to(10, 20)
    assert (c.mouse_x, c.mouse_y) == (10.0, 20.0)
    assert (c.pmouse_x, c.pmouse_y) == (0.0, 0.0)

    c.end_frame()
    c.mouse.move_to(30, 40)
    assert (c.pmouse_x, c.pmouse_y) == (10.0, 20.0)

    c.mouse.press(1)
    assert c.mouse_is_pressed
    c.mouse.release()
    assert not c.mouse_is_pressed


def test_millis_uses_clock_and_describe_sets_description() -> None:
    c = Canvas(StubRenderer(), clock=lambda: 1.5)
    assert c.millis() == pytest.approx(1500.0)

    c.describe("pink rectangle")
    assert c.description == "pink rectangle"
