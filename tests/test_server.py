"""Tests for Illustrator Exec MCP tools.

Tools are called directly as plain Python functions, without an MCP process.
The bridge is replaced so each test sees the script body a tool generated.
"""

import asyncio
import json
import re

import pytest

import illustrator_osa as osa
import illustrator_server as server
from illustrator_server import Point, RGBColor


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def bridge(monkeypatch):
    """Capture script bodies passed to run_jsx; reply with a canned envelope."""

    class Bridge:
        bodies: list[str] = []
        reply = {"success": True, "result": {"success": True, "data": {"ok": True}}}

        @property
        def body(self) -> str:
            assert self.bodies, "no script was executed"
            return self.bodies[-1]

    fake = Bridge()
    fake.bodies = []

    def run_jsx(code, timeout=None, app_name=None):
        fake.bodies.append(code)
        return fake.reply

    monkeypatch.setattr(osa, "run_jsx", run_jsx)
    return fake


def text_of(response) -> str:
    assert len(response.content) == 1
    return response.content[0].text


RED = RGBColor(r=255, g=0, b=0)
PYTHON_LITERALS = re.compile(r"\b(True|False|None)\b")


# ---------------------------------------------------------------------------
# Registration
# ---------------------------------------------------------------------------

EXPECTED_TOOLS = {
    "illustrator_create_document",
    "illustrator_open_document",
    "illustrator_save_document",
    "illustrator_close_document",
    "illustrator_export_document",
    "illustrator_get_document_info",
    "illustrator_create_rectangle",
    "illustrator_create_ellipse",
    "illustrator_draw_circle",
    "illustrator_create_polygon",
    "illustrator_create_star",
    "illustrator_create_line",
    "illustrator_create_path",
    "illustrator_create_text",
    "illustrator_select_all",
    "illustrator_select_by_name",
    "illustrator_deselect_all",
    "illustrator_move_selection",
    "illustrator_scale_selection",
    "illustrator_rotate_selection",
    "illustrator_set_fill_color",
    "illustrator_set_stroke_color",
    "illustrator_group_selection",
    "illustrator_ungroup_selection",
    "illustrator_delete_selection",
    "illustrator_duplicate_selection",
    "illustrator_get_selection_info",
    "illustrator_select_by_index",
    "illustrator_align_selection",
    "illustrator_distribute_selection",
    "illustrator_get_all_items",
    "illustrator_capture_preview",
    "illustrator_run_script",
    "illustrator_eval_expression",
    "illustrator_undo",
}


class TestRegistration:
    def test_all_tools_registered(self):
        tools = asyncio.run(server.mcp.list_tools())
        assert {t.name for t in tools} == EXPECTED_TOOLS

    def test_schema_constraints(self):
        tools = {t.name: t for t in asyncio.run(server.mcp.list_tools())}
        sides = tools["illustrator_create_polygon"].inputSchema["properties"]["sides"]
        assert sides["minimum"] == 3
        assert sides["maximum"] == 100
        align = tools["illustrator_align_selection"].inputSchema
        assert "alignment" in align["required"]

    def test_usage_resource(self):
        assert "return" in server.usage_instructions()


# ---------------------------------------------------------------------------
# Response passthrough
# ---------------------------------------------------------------------------

class TestResponses:
    def test_success_is_pretty_json(self, bridge):
        response = server.illustrator_deselect_all()
        assert not response.isError
        assert json.loads(text_of(response)) == {"ok": True}

    def test_application_error(self, bridge):
        bridge.reply = {"success": True, "result": {"success": False, "error": "No objects selected"}}
        response = server.illustrator_delete_selection()
        assert response.isError is True
        assert text_of(response) == "Illustrator error: No objects selected"

    def test_process_error(self, bridge):
        bridge.reply = {"success": False, "error": "osascript timed out after 60s"}
        response = server.illustrator_get_document_info()
        assert response.isError is True
        assert text_of(response) == "Error: osascript timed out after 60s"


# ---------------------------------------------------------------------------
# Documents
# ---------------------------------------------------------------------------

class TestDocuments:
    def test_create_defaults(self, bridge):
        server.illustrator_create_document()
        assert "preset.width = 612;" in bridge.body
        assert "preset.height = 792;" in bridge.body
        assert "DocumentColorSpace.RGB" in bridge.body
        assert "preset.title" not in bridge.body

    def test_create_named_cmyk(self, bridge):
        server.illustrator_create_document(width=100, height=50, color_mode="CMYK", name='My "Doc"')
        assert "DocumentColorSpace.CMYK" in bridge.body
        assert 'preset.title = "My \\"Doc\\"";' in bridge.body

    def test_open_escapes_path(self, bridge):
        server.illustrator_open_document(file_path='/Users/me/it\'s "art".ai')
        assert 'var path = "/Users/me/it\'s \\"art\\".ai";' in bridge.body
        assert '"File not found: " + path' in bridge.body

    def test_save_as(self, bridge):
        server.illustrator_save_document(file_path="/tmp/out.ai")
        assert 'new File("/tmp/out.ai")' in bridge.body
        assert "IllustratorSaveOptions" in bridge.body

    def test_save_in_place(self, bridge):
        server.illustrator_save_document()
        assert "doc.save();" in bridge.body

    def test_close(self, bridge):
        server.illustrator_close_document(save=True)
        assert "SaveOptions.SAVECHANGES" in bridge.body
        server.illustrator_close_document()
        assert "SaveOptions.DONOTSAVECHANGES" in bridge.body

    def test_export_jpg_default_quality(self, bridge):
        server.illustrator_export_document(file_path="/tmp/a.jpg", format="jpg")
        assert "exportOptions.qualitySetting = 80;" in bridge.body
        assert "ExportType.JPEG" in bridge.body
        assert "horizontalScale" not in bridge.body

    def test_export_png_scale(self, bridge):
        server.illustrator_export_document(file_path="/tmp/a.png", format="png", scale=2)
        assert "exportOptions.horizontalScale = 200;" in bridge.body
        assert "ExportType.PNG24" in bridge.body

    def test_export_pdf(self, bridge):
        server.illustrator_export_document(file_path="/tmp/a.pdf", format="pdf")
        assert "PDFSaveOptions" in bridge.body
        assert "doc.saveAs(exportFile, saveOptions);" in bridge.body

    def test_document_guard(self, bridge):
        server.illustrator_get_document_info()
        assert bridge.body.startswith("if (app.documents.length === 0)")
        assert "No document open in Illustrator." in bridge.body


# ---------------------------------------------------------------------------
# Shapes
# ---------------------------------------------------------------------------

class TestShapes:
    def test_rectangle(self, bridge):
        server.illustrator_create_rectangle(x=10, y=20, width=100, height=50)
        assert "doc.pathItems.rectangle(20, 10, 100, 50);" in bridge.body
        assert "new RGBColor()" not in bridge.body

    def test_rectangle_colors(self, bridge):
        server.illustrator_create_rectangle(
            x=0, y=0, width=1, height=1, fill_color=RED, stroke_color=RED, stroke_width=2
        )
        assert "item.fillColor = fill;" in bridge.body
        assert "item.filled = true;" in bridge.body
        assert "item.strokeColor = stroke;" in bridge.body
        assert "item.stroked = true;" in bridge.body
        assert "item.strokeWidth = 2;" in bridge.body

    def test_circle_converts_center(self, bridge):
        server.illustrator_draw_circle(center_x=100, center_y=200, radius=50)
        assert "doc.pathItems.ellipse(250, 50, 100, 100);" in bridge.body
        assert "radius: 50" in bridge.body

    def test_polygon_and_star(self, bridge):
        server.illustrator_create_polygon(center_x=1, center_y=2, radius=3, sides=6)
        assert "doc.pathItems.polygon(1, 2, 3, 6);" in bridge.body
        server.illustrator_create_star(center_x=1, center_y=2, outer_radius=10, inner_radius=4, points=5)
        assert "doc.pathItems.star(1, 2, 10, 4, 5);" in bridge.body

    def test_line(self, bridge):
        server.illustrator_create_line(start_x=0, start_y=0, end_x=3, end_y=4)
        assert "item.setEntirePath([[0, 0], [3, 4]]);" in bridge.body
        assert "item.strokeWidth = 1;" in bridge.body

    def test_path(self, bridge):
        points = [Point(x=0.5, y=1.5), Point(x=10.5, y=1.5), Point(x=10.5, y=8.25)]
        server.illustrator_create_path(points=points, closed=True, fill_color=RED)
        assert "item.setEntirePath([[0.5,1.5],[10.5,1.5],[10.5,8.25]]);" in bridge.body
        assert "item.closed = true;" in bridge.body
        assert "item.fillColor = fill;" in bridge.body
        assert "pointCount: 3" in bridge.body

    def test_open_path_ignores_fill(self, bridge):
        points = [Point(x=0.5, y=0.5), Point(x=1.5, y=1.5)]
        server.illustrator_create_path(points=points, fill_color=RED)
        assert "item.closed = false;" in bridge.body
        assert "item.filled = false;" in bridge.body
        assert "item.fillColor" not in bridge.body

    def test_text_content_escaped(self, bridge):
        server.illustrator_create_text(content='He said "hi"\nbye \\o/', x=1, y=2)
        assert 'item.contents = "He said \\"hi\\"\\nbye \\\\o/";' in bridge.body
        assert "characterAttributes.size = 12;" in bridge.body
        assert "textFonts.getByName" not in bridge.body

    def test_text_font_and_color(self, bridge):
        server.illustrator_create_text(content="x", x=1, y=2, font_name="Helvetica", fill_color=RED)
        assert 'app.textFonts.getByName("Helvetica")' in bridge.body
        assert "item.textRange.characterAttributes.fillColor = fill;" in bridge.body


# ---------------------------------------------------------------------------
# Objects
# ---------------------------------------------------------------------------

class TestObjects:
    def test_select_all_on_artboard(self, bridge):
        server.illustrator_select_all()
        assert "doc.selectObjectsOnActiveArtboard();" in bridge.body

    def test_select_all_on_layer(self, bridge):
        server.illustrator_select_all(layer_name='Layer "1"')
        assert 'doc.layers.getByName("Layer \\"1\\"")' in bridge.body

    def test_select_by_name(self, bridge):
        server.illustrator_select_by_name(name="logo's \"mark\"")
        assert 'var target = "logo\'s \\"mark\\"";' in bridge.body

    def test_selection_guard(self, bridge):
        server.illustrator_move_selection(delta_x=5, delta_y=-5)
        assert "if (!sel || sel.length < 1)" in bridge.body
        assert 'throw new Error("No objects selected");' in bridge.body
        assert "sel[i].translate(5, -5);" in bridge.body

    def test_scale_and_rotate(self, bridge):
        server.illustrator_scale_selection(scale_x=150, scale_y=50)
        assert "sel[i].resize(150, 50);" in bridge.body
        server.illustrator_rotate_selection(angle=45)
        assert "sel[i].rotate(45);" in bridge.body

    def test_fill_color(self, bridge):
        server.illustrator_set_fill_color(color=RGBColor(r=10, g=20, b=30))
        assert "target.fillColor = color;" in bridge.body
        assert 'case "GroupItem":' in bridge.body
        assert "default:" in bridge.body

    def test_stroke_color_width(self, bridge):
        server.illustrator_set_stroke_color(color=RED, width=3)
        assert "target.strokeWidth = 3;" in bridge.body
        assert '"width":3' in bridge.body

    def test_paint_function_indentation(self, bridge):
        server.illustrator_set_fill_color(color=RED)
        assert "    target.filled = true;\n    count++;\n}\n" in bridge.body
        server.illustrator_set_stroke_color(color=RED, width=2)
        assert "    target.stroked = true;\n    target.strokeWidth = 2;\n    count++;\n}\n" in bridge.body

    def test_group_needs_two(self, bridge):
        server.illustrator_group_selection()
        assert "sel.length < 2" in bridge.body
        assert "Select at least 2 objects to group" in bridge.body

    def test_distribute_needs_three(self, bridge):
        server.illustrator_distribute_selection(direction="vertical", spacing="spacing")
        assert "sel.length < 3" in bridge.body
        assert 'var direction = "vertical";' in bridge.body
        assert 'var spacing = "spacing";' in bridge.body

    def test_duplicate_defaults(self, bridge):
        server.illustrator_duplicate_selection()
        assert "dup.translate(10, -10);" in bridge.body

    def test_select_by_index(self, bridge):
        server.illustrator_select_by_index(index=4)
        assert "var index = 4;" in bridge.body
        assert "out of range. Document has" in bridge.body
        assert "doc.selection = null;" in bridge.body
        server.illustrator_select_by_index(index=4, add_to_selection=True)
        assert "doc.selection = null;" not in bridge.body

    def test_align(self, bridge):
        server.illustrator_align_selection(alignment="vertical-center", relative_to="artboard")
        assert 'var alignment = "vertical-center";' in bridge.body
        assert 'var relativeTo = "artboard";' in bridge.body
        assert "getActiveArtboardIndex" in bridge.body

    def test_selection_info_uses_closed_dispatch(self, bridge):
        server.illustrator_get_selection_info()
        assert "switch (item.typename)" in bridge.body
        assert "describeItem(sel[i], i, false)" in bridge.body


# ---------------------------------------------------------------------------
# Inspect and scripting
# ---------------------------------------------------------------------------

class TestInspectAndScripting:
    def test_all_items_nests_groups(self, bridge):
        server.illustrator_get_all_items()
        assert "describeItem(item, i, true)" in bridge.body
        assert 'item.parent.typename === "GroupItem"' in bridge.body

    def test_capture_preview(self, bridge):
        server.illustrator_capture_preview(file_path="/tmp/preview.png")
        assert 'new File("/tmp/preview.png")' in bridge.body
        assert "exportOptions.horizontalScale = 100;" in bridge.body

    def test_run_script_passes_code_unchanged(self, bridge):
        code = "var doc = app.activeDocument;\nreturn doc.name;"
        server.illustrator_run_script(code=code)
        assert bridge.body == code

    @pytest.mark.parametrize("steps, expected", [(1, 1), (0, 1), (-3, 1), (7, 7), (500, 50)])
    def test_undo_clamps(self, bridge, steps, expected):
        server.illustrator_undo(steps=steps)
        assert f"var steps = {expected};" in bridge.body

    def test_eval_expression(self, monkeypatch):
        seen = []

        def eval_expr(expression, timeout=None):
            seen.append(expression)
            return {"success": True, "result": {"success": False, "error": "foo is undefined"}}

        monkeypatch.setattr(osa, "eval_expr", eval_expr)
        response = server.illustrator_eval_expression(expression="foo.bar")
        assert seen == ["foo.bar"]
        assert response.isError is True
        assert text_of(response) == "Illustrator error: foo is undefined"


def test_generated_scripts_use_js_literals(bridge):
    server.illustrator_create_path(points=[Point(x=1.5, y=1.5), Point(x=2.5, y=2.5)], closed=False)
    server.illustrator_close_document(save=False)
    server.illustrator_select_by_index(index=0, add_to_selection=True)
    server.illustrator_create_document(name=None)
    server.illustrator_set_stroke_color(color=RED)
    for body in bridge.bodies:
        assert not PYTHON_LITERALS.search(body), body
