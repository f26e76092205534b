# /// script
# requires-python = ">=3.11"
# dependencies = [
#     "mcp>=1.17.0,<2",
#     "pydantic>=2.7",
# ]
# ///
"""
Illustrator Exec MCP Server.

Provides tools for driving Adobe Illustrator via JSX over osascript:
  Document  - create, open, save, close, export, document info
  Shapes    - rectangle, ellipse, circle, polygon, star, line, path, text
  Objects   - selection, transform, color, grouping, align, distribute
  Inspect   - list all items, capture a PNG preview
  Scripting - run_script, eval_expression, undo

Requires Adobe Illustrator running on macOS.
Every tool returns a single text block; failures set isError.
"""

import logging
import sys
from pathlib import Path
from typing import Annotated, Literal

from mcp import types
from mcp.server.fastmcp import FastMCP
from pydantic import BaseModel, Field

# Add script directory to sys.path so illustrator_osa can be imported
sys.path.insert(0, str(Path(__file__).parent))

import illustrator_osa as osa
from jsx_codec import to_jsx_literal as js

log = logging.getLogger("illustrator_server")

mcp = FastMCP(
    "Illustrator Exec",
    instructions=(
        "This server controls a running Adobe Illustrator instance on macOS by executing "
        "ExtendScript (JSX) through osascript.\n\n"
        "Use the document, shape and object tools for common operations. Use "
        "illustrator_run_script for anything else. In run_script code, hand data back "
        "with a plain return statement:\n"
        "  var doc = app.activeDocument;\n"
        "  return {name: doc.name, layers: doc.layers.length};\n\n"
        "Coordinates are in points. Illustrator's y axis points up: 'top' is the larger y.\n"
        "Inspect with illustrator_get_document_info or illustrator_get_all_items before "
        "modifying, and verify afterwards. Use illustrator_undo to revert mistakes."
    ),
)


# ---------------------------------------------------------------------------
# Schemas
# ---------------------------------------------------------------------------

class RGBColor(BaseModel):
    """RGB color."""

    r: Annotated[float, Field(ge=0, le=255, description="Red component (0-255)")]
    g: Annotated[float, Field(ge=0, le=255, description="Green component (0-255)")]
    b: Annotated[float, Field(ge=0, le=255, description="Blue component (0-255)")]


class Point(BaseModel):
    x: Annotated[float, Field(description="X coordinate in points")]
    y: Annotated[float, Field(description="Y coordinate in points")]


Positive = Annotated[float, Field(gt=0)]
SideCount = Annotated[int, Field(ge=3, le=100)]


# ---------------------------------------------------------------------------
# MCP Resource: Usage instructions for the agent
# ---------------------------------------------------------------------------

@mcp.resource("config://usage")
def usage_instructions() -> str:
    """Usage guide for the Illustrator Exec MCP. Read this first."""
    return """\
# Illustrator Exec MCP: Usage Guide

## The return Convention
illustrator_run_script wraps your code in a function. Hand data back with `return`:

    var doc = app.activeDocument;
    return {name: doc.name, items: doc.pageItems.length};

Returned values are serialised to JSON inside Illustrator (no native JSON in
ExtendScript). Numbers that are not finite become null. Returning nothing gives null.

## Errors
Throw to report a problem: `throw new Error("No selection");`
The tool answers `Illustrator error: No selection` with isError set.
`Error: ...` means osascript itself failed (Illustrator not running, timeout,
syntax error in the script).

## Coordinates
Points, origin at the artboard's top-left in modern documents, y grows upward:
an item's `top` is larger than its `top - height`.

## Workflow Pattern
1. **Inspect**: illustrator_get_document_info / illustrator_get_all_items
2. **Act**: shape and object tools, or illustrator_run_script
3. **Verify**: illustrator_get_selection_info or illustrator_capture_preview
4. **Rollback**: illustrator_undo
"""


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

_REQUIRE_DOCUMENT = """\
if (app.documents.length === 0) {
    throw new Error("No document open in Illustrator.");
}
var doc = app.activeDocument;
"""


def _require_selection(minimum: int = 1, message: str = "No objects selected") -> str:
    """JSX guard that throws unless at least ``minimum`` items are selected."""
    return (
        _REQUIRE_DOCUMENT
        + "var sel = doc.selection;\n"
        + f"if (!sel || sel.length < {minimum}) {{\n"
        + f"    throw new Error({js(message)});\n"
        + "}\n"
    )


def _color_jsx(var_name: str, color: RGBColor | None, prop: str) -> str:
    """Assign an RGBColor to ``item.<prop>`` and switch fill/stroke on."""
    if color is None:
        return ""
    flag = "filled" if prop == "fillColor" else "stroked"
    return (
        f"var {var_name} = new RGBColor();\n"
        f"{var_name}.red = {js(color.r)};\n"
        f"{var_name}.green = {js(color.g)};\n"
        f"{var_name}.blue = {js(color.b)};\n"
        f"item.{prop} = {var_name};\n"
        f"item.{flag} = true;\n"
    )


def _color_dict(color: RGBColor) -> dict:
    return {"r": color.r, "g": color.g, "b": color.b}


_BOUNDS = "bounds: {left: item.left, top: item.top, width: item.width, height: item.height}"

# Closed dispatch over item/colour type names; unknown kinds fall to default.
_DESCRIBE_JSX = """\
function describeColor(color) {
    if (!color) return null;
    switch (color.typename) {
        case "RGBColor":
            return {r: Math.round(color.red), g: Math.round(color.green), b: Math.round(color.blue)};
        case "GrayColor":
            var gray = Math.round(255 * (1 - color.gray / 100));
            return {r: gray, g: gray, b: gray};
        case "CMYKColor":
            var k = 1 - color.black / 100;
            return {
                r: Math.round(255 * (1 - color.cyan / 100) * k),
                g: Math.round(255 * (1 - color.magenta / 100) * k),
                b: Math.round(255 * (1 - color.yellow / 100) * k)
            };
        case "NoColor":
            return null;
        default:
            return null;
    }
}

function describeItem(item, index, deep) {
    var info = {
        index: index,
        type: item.typename,
        name: item.name || "",
        bounds: {
            left: Math.round(item.left * 100) / 100,
            top: Math.round(item.top * 100) / 100,
            width: Math.round(item.width * 100) / 100,
            height: Math.round(item.height * 100) / 100
        },
        visible: item.hidden !== true,
        locked: item.locked === true
    };
    switch (item.typename) {
        case "PathItem":
            info.filled = item.filled;
            info.stroked = item.stroked;
            info.closed = item.closed;
            info.pointCount = item.pathPoints.length;
            if (item.filled) info.fillColor = describeColor(item.fillColor);
            if (item.stroked) {
                info.strokeColor = describeColor(item.strokeColor);
                info.strokeWidth = item.strokeWidth;
            }
            break;
        case "CompoundPathItem":
            info.pathCount = item.pathItems.length;
            break;
        case "TextFrame":
            info.contents = item.contents.substring(0, 100);
            try { info.fontSize = item.textRange.characterAttributes.size; } catch (e) {}
            break;
        case "GroupItem":
            info.itemCount = item.pageItems.length;
            if (deep) {
                info.children = [];
                for (var j = 0; j < item.pageItems.length; j++) {
                    info.children.push(describeItem(item.pageItems[j], j, deep));
                }
            }
            break;
        case "PlacedItem":
        case "RasterItem":
            try { info.file = item.file ? item.file.fsName : null; } catch (e) {}
            break;
        default:
            break;
    }
    return info;
}
"""


def _run(body: str) -> types.CallToolResult:
    """Execute a script body and format the outcome."""
    return osa.format_result(osa.run_jsx(body))


# ---------------------------------------------------------------------------
# Document tools
# ---------------------------------------------------------------------------

@mcp.tool()
def illustrator_create_document(
    width: Positive = 612,
    height: Positive = 792,
    color_mode: Literal["RGB", "CMYK"] = "RGB",
    name: str | None = None,
) -> types.CallToolResult:
    """Create a new Adobe Illustrator document.

    Args:
        width: Width in points (default: 612 = 8.5 inches)
        height: Height in points (default: 792 = 11 inches)
        color_mode: Document color mode, RGB or CMYK
        name: Optional document name
    """
    title = f"preset.title = {js(name)};\n" if name else ""
    body = (
        "var preset = new DocumentPreset();\n"
        f"preset.width = {js(width)};\n"
        f"preset.height = {js(height)};\n"
        f"preset.colorMode = DocumentColorSpace.{color_mode};\n"
        + title
        + 'var doc = app.documents.addDocument("", preset);\n'
        "return {\n"
        "    name: doc.name,\n"
        "    width: doc.width,\n"
        "    height: doc.height,\n"
        "    colorSpace: String(doc.documentColorSpace)\n"
        "};\n"
    )
    return _run(body)


@mcp.tool()
def illustrator_open_document(file_path: str) -> types.CallToolResult:
    """Open an existing Illustrator document.

    Args:
        file_path: Absolute path to the Illustrator file
    """
    body = (
        f"var path = {js(file_path)};\n"
        "var fileRef = new File(path);\n"
        "if (!fileRef.exists) {\n"
        '    throw new Error("File not found: " + path);\n'
        "}\n"
        "var doc = app.open(fileRef);\n"
        "return {\n"
        "    name: doc.name,\n"
        "    path: doc.fullName.fsName,\n"
        "    width: doc.width,\n"
        "    height: doc.height,\n"
        "    colorSpace: String(doc.documentColorSpace)\n"
        "};\n"
    )
    return _run(body)


@mcp.tool()
def illustrator_save_document(file_path: str | None = None) -> types.CallToolResult:
    """Save the active Illustrator document.

    Args:
        file_path: Path to save as (optional for documents already on disk)
    """
    if file_path:
        body = (
            _REQUIRE_DOCUMENT
            + f"var saveFile = new File({js(file_path)});\n"
            "doc.saveAs(saveFile, new IllustratorSaveOptions());\n"
            "return {saved: true, path: saveFile.fsName};\n"
        )
    else:
        body = (
            _REQUIRE_DOCUMENT
            + "doc.save();\n"
            "return {saved: true, path: doc.fullName ? doc.fullName.fsName : null};\n"
        )
    return _run(body)


@mcp.tool()
def illustrator_close_document(save: bool = False) -> types.CallToolResult:
    """Close the active Illustrator document.

    Args:
        save: Save before closing
    """
    option = "SaveOptions.SAVECHANGES" if save else "SaveOptions.DONOTSAVECHANGES"
    body = (
        _REQUIRE_DOCUMENT
        + "var name = doc.name;\n"
        f"doc.close({option});\n"
        "return {closed: true, name: name};\n"
    )
    return _run(body)


def _scale_jsx(scale: float | None) -> str:
    if not scale:
        return ""
    percent = js(scale * 100)
    return f"exportOptions.horizontalScale = {percent};\nexportOptions.verticalScale = {percent};\n"


@mcp.tool()
def illustrator_export_document(
    file_path: str,
    format: Literal["png", "jpg", "svg", "pdf"],
    quality: Annotated[int, Field(ge=0, le=100)] | None = None,
    scale: Positive | None = None,
) -> types.CallToolResult:
    """Export the active document to PNG, JPG, SVG, or PDF.

    Args:
        file_path: Export file path
        format: png, jpg, svg or pdf
        quality: JPEG quality 0-100 (default 80)
        scale: Export scale for raster formats (1 = 100%)
    """
    if format == "png":
        export = (
            "var exportOptions = new ExportOptionsPNG24();\n"
            "exportOptions.transparency = true;\n"
            "exportOptions.artBoardClipping = true;\n"
            + _scale_jsx(scale)
            + "doc.exportFile(exportFile, ExportType.PNG24, exportOptions);\n"
        )
    elif format == "jpg":
        export = (
            "var exportOptions = new ExportOptionsJPEG();\n"
            f"exportOptions.qualitySetting = {js(quality if quality is not None else 80)};\n"
            "exportOptions.artBoardClipping = true;\n"
            + _scale_jsx(scale)
            + "doc.exportFile(exportFile, ExportType.JPEG, exportOptions);\n"
        )
    elif format == "svg":
        export = (
            "var exportOptions = new ExportOptionsSVG();\n"
            "exportOptions.embedRasterImages = true;\n"
            "doc.exportFile(exportFile, ExportType.SVG, exportOptions);\n"
        )
    else:
        export = (
            "var saveOptions = new PDFSaveOptions();\n"
            "saveOptions.compatibility = PDFCompatibility.ACROBAT7;\n"
            "saveOptions.preserveEditability = false;\n"
            "doc.saveAs(exportFile, saveOptions);\n"
        )
    body = (
        _REQUIRE_DOCUMENT
        + f"var exportFile = new File({js(file_path)});\n"
        + export
        + f"return {{exported: true, path: exportFile.fsName, format: {js(format)}}};\n"
    )
    return _run(body)


_DOC_INFO_JSX = (
    _REQUIRE_DOCUMENT
    + """\
var layers = [];
for (var i = 0; i < doc.layers.length; i++) {
    layers.push({
        name: doc.layers[i].name,
        visible: doc.layers[i].visible,
        locked: doc.layers[i].locked,
        itemCount: doc.layers[i].pageItems.length
    });
}
var artboards = [];
for (var j = 0; j < doc.artboards.length; j++) {
    var ab = doc.artboards[j];
    var rect = ab.artboardRect;
    artboards.push({
        name: ab.name,
        left: rect[0],
        top: rect[1],
        right: rect[2],
        bottom: rect[3],
        width: rect[2] - rect[0],
        height: rect[1] - rect[3]
    });
}
return {
    name: doc.name,
    path: doc.fullName ? doc.fullName.fsName : null,
    saved: doc.saved,
    width: doc.width,
    height: doc.height,
    colorSpace: String(doc.documentColorSpace),
    rulerUnits: String(doc.rulerUnits),
    layers: layers,
    artboards: artboards,
    pageItemCount: doc.pageItems.length,
    selectionCount: doc.selection ? doc.selection.length : 0
};
"""
)


@mcp.tool()
def illustrator_get_document_info() -> types.CallToolResult:
    """Get information about the active document: layers, artboards, counts."""
    return _run(_DOC_INFO_JSX)


# ---------------------------------------------------------------------------
# Shape tools
# ---------------------------------------------------------------------------

def _stroke_width_jsx(stroke_width: float | None) -> str:
    return f"item.strokeWidth = {js(stroke_width)};\n" if stroke_width else ""


@mcp.tool()
def illustrator_create_rectangle(
    x: float,
    y: float,
    width: Positive,
    height: Positive,
    fill_color: RGBColor | None = None,
    stroke_color: RGBColor | None = None,
    stroke_width: Positive | None = None,
) -> types.CallToolResult:
    """Create a rectangle in the active document.

    Args:
        x: Left edge in points
        y: Top edge in points
        width: Width in points
        height: Height in points
        fill_color: Fill color
        stroke_color: Stroke color
        stroke_width: Stroke width in points
    """
    body = (
        _REQUIRE_DOCUMENT
        + f"var item = doc.pathItems.rectangle({js(y)}, {js(x)}, {js(width)}, {js(height)});\n"
        + _color_jsx("fill", fill_color, "fillColor")
        + _color_jsx("stroke", stroke_color, "strokeColor")
        + _stroke_width_jsx(stroke_width)
        + f'return {{type: "rectangle", {_BOUNDS}}};\n'
    )
    return _run(body)


@mcp.tool()
def illustrator_create_ellipse(
    x: float,
    y: float,
    width: Positive,
    height: Positive,
    fill_color: RGBColor | None = None,
    stroke_color: RGBColor | None = None,
    stroke_width: Positive | None = None,
) -> types.CallToolResult:
    """Create an ellipse in the active document.

    Args:
        x: Left edge of the bounding box in points
        y: Top edge of the bounding box in points
        width: Width in points
        height: Height in points
        fill_color: Fill color
        stroke_color: Stroke color
        stroke_width: Stroke width in points
    """
    body = (
        _REQUIRE_DOCUMENT
        + f"var item = doc.pathItems.ellipse({js(y)}, {js(x)}, {js(width)}, {js(height)});\n"
        + _color_jsx("fill", fill_color, "fillColor")
        + _color_jsx("stroke", stroke_color, "strokeColor")
        + _stroke_width_jsx(stroke_width)
        + f'return {{type: "ellipse", {_BOUNDS}}};\n'
    )
    return _run(body)


@mcp.tool()
def illustrator_draw_circle(
    center_x: float,
    center_y: float,
    radius: Positive,
    fill_color: RGBColor | None = None,
    stroke_color: RGBColor | None = None,
    stroke_width: Positive | None = None,
) -> types.CallToolResult:
    """Draw a circle in the active document.

    Args:
        center_x: X coordinate of the center in points
        center_y: Y coordinate of the center in points
        radius: Radius in points
        fill_color: Fill color
        stroke_color: Stroke color
        stroke_width: Stroke width in points
    """
    top = center_y + radius
    left = center_x - radius
    diameter = radius * 2
    body = (
        _REQUIRE_DOCUMENT
        + f"var item = doc.pathItems.ellipse({js(top)}, {js(left)}, {js(diameter)}, {js(diameter)});\n"
        + _color_jsx("fill", fill_color, "fillColor")
        + _color_jsx("stroke", stroke_color, "strokeColor")
        + _stroke_width_jsx(stroke_width)
        + "return {\n"
        '    type: "circle",\n'
        f"    centerX: {js(center_x)},\n"
        f"    centerY: {js(center_y)},\n"
        f"    radius: {js(radius)},\n"
        f"    {_BOUNDS}\n"
        "};\n"
    )
    return _run(body)


@mcp.tool()
def illustrator_create_polygon(
    center_x: float,
    center_y: float,
    radius: Positive,
    sides: SideCount,
    fill_color: RGBColor | None = None,
    stroke_color: RGBColor | None = None,
) -> types.CallToolResult:
    """Create a regular polygon in the active document.

    Args:
        center_x: Center X position
        center_y: Center Y position
        radius: Radius in points
        sides: Number of sides (3-100)
        fill_color: Fill color
        stroke_color: Stroke color
    """
    body = (
        _REQUIRE_DOCUMENT
        + f"var item = doc.pathItems.polygon({js(center_x)}, {js(center_y)}, {js(radius)}, {js(sides)});\n"
        + _color_jsx("fill", fill_color, "fillColor")
        + _color_jsx("stroke", stroke_color, "strokeColor")
        + f'return {{type: "polygon", sides: {js(sides)}, {_BOUNDS}}};\n'
    )
    return _run(body)


@mcp.tool()
def illustrator_create_star(
    center_x: float,
    center_y: float,
    outer_radius: Positive,
    inner_radius: Positive,
    points: SideCount,
    fill_color: RGBColor | None = None,
    stroke_color: RGBColor | None = None,
) -> types.CallToolResult:
    """Create a star shape in the active document.

    Args:
        center_x: Center X position
        center_y: Center Y position
        outer_radius: Outer radius in points
        inner_radius: Inner radius in points
        points: Number of points (3-100)
        fill_color: Fill color
        stroke_color: Stroke color
    """
    body = (
        _REQUIRE_DOCUMENT
        + "var item = doc.pathItems.star("
        f"{js(center_x)}, {js(center_y)}, {js(outer_radius)}, {js(inner_radius)}, {js(points)});\n"
        + _color_jsx("fill", fill_color, "fillColor")
        + _color_jsx("stroke", stroke_color, "strokeColor")
        + f'return {{type: "star", points: {js(points)}, {_BOUNDS}}};\n'
    )
    return _run(body)


@mcp.tool()
def illustrator_create_line(
    start_x: float,
    start_y: float,
    end_x: float,
    end_y: float,
    stroke_color: RGBColor | None = None,
    stroke_width: Positive = 1,
) -> types.CallToolResult:
    """Create a straight line in the active document.

    Args:
        start_x: Start X position
        start_y: Start Y position
        end_x: End X position
        end_y: End Y position
        stroke_color: Stroke color
        stroke_width: Stroke width in points (default 1)
    """
    body = (
        _REQUIRE_DOCUMENT
        + "var item = doc.pathItems.add();\n"
        f"item.setEntirePath([[{js(start_x)}, {js(start_y)}], [{js(end_x)}, {js(end_y)}]]);\n"
        "item.filled = false;\n"
        "item.stroked = true;\n"
        f"item.strokeWidth = {js(stroke_width)};\n"
        + _color_jsx("stroke", stroke_color, "strokeColor")
        + "return {\n"
        '    type: "line",\n'
        f"    start: {{x: {js(start_x)}, y: {js(start_y)}}},\n"
        f"    end: {{x: {js(end_x)}, y: {js(end_y)}}},\n"
        f"    length: Math.sqrt(Math.pow({js(end_x)} - {js(start_x)}, 2) + Math.pow({js(end_y)} - {js(start_y)}, 2))\n"
        "};\n"
    )
    return _run(body)


@mcp.tool()
def illustrator_create_path(
    points: Annotated[list[Point], Field(min_length=2)],
    closed: bool = False,
    fill_color: RGBColor | None = None,
    stroke_color: RGBColor | None = None,
    stroke_width: Positive | None = None,
) -> types.CallToolResult:
    """Create a custom path from points in the active document.

    Args:
        points: At least two points
        closed: Close the path
        fill_color: Fill color (applied only when closed)
        stroke_color: Stroke color
        stroke_width: Stroke width in points
    """
    coords = js([[p.x, p.y] for p in points])
    fill = _color_jsx("fill", fill_color, "fillColor") if closed and fill_color else "item.filled = false;\n"
    stroke = _color_jsx("stroke", stroke_color, "strokeColor") if stroke_color else "item.stroked = true;\n"
    body = (
        _REQUIRE_DOCUMENT
        + "var item = doc.pathItems.add();\n"
        f"item.setEntirePath({coords});\n"
        f"item.closed = {js(closed)};\n"
        + fill
        + stroke
        + _stroke_width_jsx(stroke_width)
        + f'return {{type: "path", pointCount: {len(points)}, closed: {js(closed)}, {_BOUNDS}}};\n'
    )
    return _run(body)


@mcp.tool()
def illustrator_create_text(
    content: str,
    x: float,
    y: float,
    font_size: Positive = 12,
    font_name: str | None = None,
    fill_color: RGBColor | None = None,
) -> types.CallToolResult:
    """Create a point text frame in the active document.

    Args:
        content: Text content
        x: X position
        y: Y position
        font_size: Font size in points (default 12)
        font_name: PostScript font name; left unchanged if not installed
        fill_color: Text color
    """
    font = ""
    if font_name:
        font = (
            "try {\n"
            f"    item.textRange.characterAttributes.textFont = app.textFonts.getByName({js(font_name)});\n"
            "} catch (e) {}\n"
        )
    fill = ""
    if fill_color is not None:
        fill = (
            "var fill = new RGBColor();\n"
            f"fill.red = {js(fill_color.r)};\n"
            f"fill.green = {js(fill_color.g)};\n"
            f"fill.blue = {js(fill_color.b)};\n"
            "item.textRange.characterAttributes.fillColor = fill;\n"
        )
    body = (
        _REQUIRE_DOCUMENT
        + "var item = doc.textFrames.add();\n"
        f"item.contents = {js(content)};\n"
        f"item.position = [{js(x)}, {js(y)}];\n"
        f"item.textRange.characterAttributes.size = {js(font_size)};\n"
        + font
        + fill
        + "return {\n"
        '    type: "text",\n'
        "    content: item.contents,\n"
        "    position: {x: item.position[0], y: item.position[1]},\n"
        "    fontSize: item.textRange.characterAttributes.size,\n"
        f"    {_BOUNDS}\n"
        "};\n"
    )
    return _run(body)


# ---------------------------------------------------------------------------
# Object tools
# ---------------------------------------------------------------------------

@mcp.tool()
def illustrator_select_all(layer_name: str | None = None) -> types.CallToolResult:
    """Select all objects on the active artboard, or every item of one layer.

    Args:
        layer_name: Optional layer name to select from
    """
    if layer_name:
        body = (
            _REQUIRE_DOCUMENT
            + f"var layer = doc.layers.getByName({js(layer_name)});\n"
            "for (var i = 0; i < layer.pageItems.length; i++) {\n"
            "    layer.pageItems[i].selected = true;\n"
            "}\n"
            "return {selectedCount: layer.pageItems.length, layer: layer.name};\n"
        )
    else:
        body = (
            _REQUIRE_DOCUMENT
            + "doc.selectObjectsOnActiveArtboard();\n"
            "return {selectedCount: doc.selection.length};\n"
        )
    return _run(body)


@mcp.tool()
def illustrator_select_by_name(name: str) -> types.CallToolResult:
    """Select every object whose name matches exactly.

    Args:
        name: Object name to select
    """
    body = (
        _REQUIRE_DOCUMENT
        + f"var target = {js(name)};\n"
        "var count = 0;\n"
        "for (var i = 0; i < doc.pageItems.length; i++) {\n"
        "    if (doc.pageItems[i].name === target) {\n"
        "        doc.pageItems[i].selected = true;\n"
        "        count++;\n"
        "    }\n"
        "}\n"
        "return {selectedCount: count, name: target};\n"
    )
    return _run(body)


@mcp.tool()
def illustrator_deselect_all() -> types.CallToolResult:
    """Deselect all objects."""
    return _run(_REQUIRE_DOCUMENT + "doc.selection = null;\nreturn {deselected: true};\n")


@mcp.tool()
def illustrator_move_selection(delta_x: float, delta_y: float) -> types.CallToolResult:
    """Move selected objects by an offset.

    Args:
        delta_x: Horizontal offset in points
        delta_y: Vertical offset in points
    """
    body = (
        _require_selection()
        + "for (var i = 0; i < sel.length; i++) {\n"
        f"    sel[i].translate({js(delta_x)}, {js(delta_y)});\n"
        "}\n"
        f"return {{movedCount: sel.length, deltaX: {js(delta_x)}, deltaY: {js(delta_y)}}};\n"
    )
    return _run(body)


@mcp.tool()
def illustrator_scale_selection(scale_x: Positive, scale_y: Positive) -> types.CallToolResult:
    """Scale selected objects by percentage.

    Args:
        scale_x: Horizontal scale percentage (100 = no change)
        scale_y: Vertical scale percentage (100 = no change)
    """
    body = (
        _require_selection()
        + "for (var i = 0; i < sel.length; i++) {\n"
        f"    sel[i].resize({js(scale_x)}, {js(scale_y)});\n"
        "}\n"
        f"return {{scaledCount: sel.length, scaleX: {js(scale_x)}, scaleY: {js(scale_y)}}};\n"
    )
    return _run(body)


@mcp.tool()
def illustrator_rotate_selection(angle: float) -> types.CallToolResult:
    """Rotate selected objects.

    Args:
        angle: Rotation angle in degrees (positive = counter-clockwise)
    """
    body = (
        _require_selection()
        + "for (var i = 0; i < sel.length; i++) {\n"
        f"    sel[i].rotate({js(angle)});\n"
        "}\n"
        f"return {{rotatedCount: sel.length, angle: {js(angle)}}};\n"
    )
    return _run(body)


def _paint_selection_jsx(prop: str, color: RGBColor, width: float | None = None) -> str:
    """Apply a color to selected paths and to the paths directly inside selected groups."""
    flag = "filled" if prop == "fillColor" else "stroked"
    set_width = f"    target.strokeWidth = {js(width)};\n" if width else ""
    return (
        _require_selection()
        + "var color = new RGBColor();\n"
        f"color.red = {js(color.r)};\n"
        f"color.green = {js(color.g)};\n"
        f"color.blue = {js(color.b)};\n"
        "var count = 0;\n"
        "function paint(target) {\n"
        f"    target.{prop} = color;\n"
        f"    target.{flag} = true;\n"
        + set_width
        + "    count++;\n"
        "}\n"
        "for (var i = 0; i < sel.length; i++) {\n"
        "    var item = sel[i];\n"
        "    switch (item.typename) {\n"
        '        case "PathItem":\n'
        '        case "CompoundPathItem":\n'
        "            paint(item);\n"
        "            break;\n"
        '        case "GroupItem":\n'
        "            for (var j = 0; j < item.pathItems.length; j++) {\n"
        "                paint(item.pathItems[j]);\n"
        "            }\n"
        "            break;\n"
        "        default:\n"
        "            break;\n"
        "    }\n"
        "}\n"
    )


@mcp.tool()
def illustrator_set_fill_color(color: RGBColor) -> types.CallToolResult:
    """Set the fill color of selected objects.

    Args:
        color: Fill color
    """
    body = (
        _paint_selection_jsx("fillColor", color)
        + f"return {{coloredCount: count, color: {js(_color_dict(color))}}};\n"
    )
    return _run(body)


@mcp.tool()
def illustrator_set_stroke_color(
    color: RGBColor,
    width: Positive | None = None,
) -> types.CallToolResult:
    """Set the stroke color (and optionally width) of selected objects.

    Args:
        color: Stroke color
        width: Stroke width in points
    """
    data = {"color": _color_dict(color)}
    if width:
        data["width"] = width
    body = (
        _paint_selection_jsx("strokeColor", color, width)
        + f"var result = {js(data)};\n"
        "result.strokedCount = count;\n"
        "return result;\n"
    )
    return _run(body)


@mcp.tool()
def illustrator_group_selection() -> types.CallToolResult:
    """Group selected objects."""
    body = (
        _require_selection(2, "Select at least 2 objects to group")
        + "var group = doc.groupItems.add();\n"
        "for (var i = sel.length - 1; i >= 0; i--) {\n"
        "    sel[i].move(group, ElementPlacement.PLACEATEND);\n"
        "}\n"
        "group.selected = true;\n"
        "return {grouped: true, itemCount: group.pageItems.length};\n"
    )
    return _run(body)


@mcp.tool()
def illustrator_ungroup_selection() -> types.CallToolResult:
    """Ungroup selected groups, leaving their members selected."""
    body = (
        _REQUIRE_DOCUMENT
        + "var sel = doc.selection || [];\n"
        "var ungrouped = 0;\n"
        "var released = 0;\n"
        "for (var i = sel.length - 1; i >= 0; i--) {\n"
        '    if (sel[i].typename !== "GroupItem") continue;\n'
        "    var group = sel[i];\n"
        "    var parent = group.parent;\n"
        "    var items = group.pageItems;\n"
        "    for (var j = items.length - 1; j >= 0; j--) {\n"
        "        var member = items[j];\n"
        "        member.move(parent, ElementPlacement.PLACEATEND);\n"
        "        member.selected = true;\n"
        "        released++;\n"
        "    }\n"
        "    ungrouped++;\n"
        "}\n"
        "return {ungroupedGroups: ungrouped, releasedItems: released};\n"
    )
    return _run(body)


@mcp.tool()
def illustrator_delete_selection() -> types.CallToolResult:
    """Delete selected objects."""
    body = (
        _require_selection()
        + "var count = sel.length;\n"
        "for (var i = sel.length - 1; i >= 0; i--) {\n"
        "    sel[i].remove();\n"
        "}\n"
        "return {deletedCount: count};\n"
    )
    return _run(body)


@mcp.tool()
def illustrator_duplicate_selection(offset_x: float = 10, offset_y: float = -10) -> types.CallToolResult:
    """Duplicate selected objects and select the copies.

    Args:
        offset_x: Horizontal offset for the duplicates (default 10)
        offset_y: Vertical offset for the duplicates (default -10)
    """
    body = (
        _require_selection()
        + "var duplicates = [];\n"
        "for (var i = 0; i < sel.length; i++) {\n"
        "    var dup = sel[i].duplicate();\n"
        f"    dup.translate({js(offset_x)}, {js(offset_y)});\n"
        "    duplicates.push(dup);\n"
        "}\n"
        "doc.selection = null;\n"
        "for (var j = 0; j < duplicates.length; j++) {\n"
        "    duplicates[j].selected = true;\n"
        "}\n"
        f"return {{duplicatedCount: duplicates.length, offsetX: {js(offset_x)}, offsetY: {js(offset_y)}}};\n"
    )
    return _run(body)


@mcp.tool()
def illustrator_get_selection_info() -> types.CallToolResult:
    """Get type, name, bounds and paint details of the selected objects."""
    body = (
        _DESCRIBE_JSX
        + _REQUIRE_DOCUMENT
        + "var sel = doc.selection;\n"
        "if (!sel || sel.length === 0) {\n"
        "    return {count: 0, items: []};\n"
        "}\n"
        "var items = [];\n"
        "for (var i = 0; i < sel.length; i++) {\n"
        "    items.push(describeItem(sel[i], i, false));\n"
        "}\n"
        "return {count: items.length, items: items};\n"
    )
    return _run(body)


@mcp.tool()
def illustrator_select_by_index(
    index: Annotated[int, Field(ge=0)],
    add_to_selection: bool = False,
) -> types.CallToolResult:
    """Select an object by its index in the document's page items.

    Args:
        index: 0-based index into doc.pageItems (as reported by get_all_items)
        add_to_selection: Add to the existing selection instead of replacing it
    """
    clear = "" if add_to_selection else "doc.selection = null;\n"
    body = (
        _REQUIRE_DOCUMENT
        + f"var index = {js(index)};\n"
        "if (index >= doc.pageItems.length) {\n"
        '    throw new Error("Index " + index + " out of range. Document has " + doc.pageItems.length + " items.");\n'
        "}\n"
        + clear
        + "var item = doc.pageItems[index];\n"
        "item.selected = true;\n"
        f'return {{selected: true, index: index, type: item.typename, name: item.name || "", {_BOUNDS}}};\n'
    )
    return _run(body)


_ALIGN_JSX = """\
var bounds;
if (relativeTo === "artboard") {
    var abRect = doc.artboards[doc.artboards.getActiveArtboardIndex()].artboardRect;
    bounds = {left: abRect[0], top: abRect[1], right: abRect[2], bottom: abRect[3]};
} else {
    bounds = {left: Infinity, top: -Infinity, right: -Infinity, bottom: Infinity};
    for (var i = 0; i < sel.length; i++) {
        if (sel[i].left < bounds.left) bounds.left = sel[i].left;
        if (sel[i].top > bounds.top) bounds.top = sel[i].top;
        if (sel[i].left + sel[i].width > bounds.right) bounds.right = sel[i].left + sel[i].width;
        if (sel[i].top - sel[i].height < bounds.bottom) bounds.bottom = sel[i].top - sel[i].height;
    }
}
var centerX = (bounds.left + bounds.right) / 2;
var centerY = (bounds.top + bounds.bottom) / 2;
for (var k = 0; k < sel.length; k++) {
    var item = sel[k];
    switch (alignment) {
        case "horizontal-left": item.left = bounds.left; break;
        case "horizontal-center": item.left = centerX - item.width / 2; break;
        case "horizontal-right": item.left = bounds.right - item.width; break;
        case "vertical-top": item.top = bounds.top; break;
        case "vertical-center": item.top = centerY + item.height / 2; break;
        case "vertical-bottom": item.top = bounds.bottom + item.height; break;
    }
}
return {aligned: sel.length, alignment: alignment, relativeTo: relativeTo};
"""


@mcp.tool()
def illustrator_align_selection(
    alignment: Literal[
        "horizontal-left",
        "horizontal-center",
        "horizontal-right",
        "vertical-top",
        "vertical-center",
        "vertical-bottom",
    ],
    relative_to: Literal["selection", "artboard"] = "selection",
) -> types.CallToolResult:
    """Align selected objects horizontally or vertically.

    Args:
        alignment: Edge or center to align on
        relative_to: Align to the selection's bounds or the active artboard
    """
    body = (
        _require_selection()
        + f"var alignment = {js(alignment)};\n"
        f"var relativeTo = {js(relative_to)};\n"
        + _ALIGN_JSX
    )
    return _run(body)


_DISTRIBUTE_JSX = """\
var items = [];
for (var i = 0; i < sel.length; i++) {
    items.push(sel[i]);
}
var n = items.length;
var first, last, step, gap, total, cursor;
if (direction === "horizontal") {
    items.sort(function(a, b) { return a.left - b.left; });
    first = items[0];
    last = items[n - 1];
    if (spacing === "objects") {
        var firstCenter = first.left + first.width / 2;
        step = (last.left + last.width / 2 - firstCenter) / (n - 1);
        for (var h = 1; h < n - 1; h++) {
            items[h].left = firstCenter + step * h - items[h].width / 2;
        }
    } else {
        total = 0;
        for (var w = 0; w < n; w++) total += items[w].width;
        gap = (last.left + last.width - first.left - total) / (n - 1);
        cursor = first.left + first.width + gap;
        for (var h2 = 1; h2 < n - 1; h2++) {
            items[h2].left = cursor;
            cursor += items[h2].width + gap;
        }
    }
} else {
    items.sort(function(a, b) { return b.top - a.top; });
    first = items[0];
    last = items[n - 1];
    if (spacing === "objects") {
        var topCenter = first.top - first.height / 2;
        step = (topCenter - (last.top - last.height / 2)) / (n - 1);
        for (var v = 1; v < n - 1; v++) {
            items[v].top = topCenter - step * v + items[v].height / 2;
        }
    } else {
        total = 0;
        for (var t = 0; t < n; t++) total += items[t].height;
        gap = (first.top - (last.top - last.height) - total) / (n - 1);
        cursor = first.top - first.height - gap;
        for (var v2 = 1; v2 < n - 1; v2++) {
            items[v2].top = cursor;
            cursor -= items[v2].height + gap;
        }
    }
}
return {distributed: n, direction: direction, spacing: spacing};
"""


@mcp.tool()
def illustrator_distribute_selection(
    direction: Literal["horizontal", "vertical"],
    spacing: Literal["objects", "spacing"] = "objects",
) -> types.CallToolResult:
    """Distribute three or more selected objects evenly.

    The outermost objects stay in place.

    Args:
        direction: horizontal or vertical
        spacing: "objects" spaces centers evenly, "spacing" makes the gaps equal
    """
    body = (
        _require_selection(3, "Select at least 3 objects to distribute")
        + f"var direction = {js(direction)};\n"
        f"var spacing = {js(spacing)};\n"
        + _DISTRIBUTE_JSX
    )
    return _run(body)


# ---------------------------------------------------------------------------
# Inspect tools
# ---------------------------------------------------------------------------

_ALL_ITEMS_JSX = (
    _DESCRIBE_JSX
    + _REQUIRE_DOCUMENT
    + """\
var items = [];
for (var i = 0; i < doc.pageItems.length; i++) {
    var item = doc.pageItems[i];
    // group members are listed as children of their group
    if (item.parent && item.parent.typename === "GroupItem") continue;
    items.push(describeItem(item, i, true));
}
return {
    documentName: doc.name,
    documentSize: {width: doc.width, height: doc.height},
    itemCount: doc.pageItems.length,
    topLevelItems: items.length,
    items: items
};
"""
)


@mcp.tool()
def illustrator_get_all_items() -> types.CallToolResult:
    """Get type, position, size, colors and names of every object in the active document.

    Group members appear as children of their group. ``index`` is the
    position in doc.pageItems, usable with illustrator_select_by_index.
    """
    return _run(_ALL_ITEMS_JSX)


@mcp.tool()
def illustrator_capture_preview(file_path: str, scale: Positive = 1) -> types.CallToolResult:
    """Export a PNG preview of the active document for visual inspection.

    Args:
        file_path: Where to write the PNG (e.g. /tmp/preview.png)
        scale: Export scale (1 = 100%)
    """
    body = (
        _REQUIRE_DOCUMENT
        + f"var exportFile = new File({js(file_path)});\n"
        "var exportOptions = new ExportOptionsPNG24();\n"
        "exportOptions.transparency = true;\n"
        "exportOptions.artBoardClipping = true;\n"
        + _scale_jsx(scale)
        + "doc.exportFile(exportFile, ExportType.PNG24, exportOptions);\n"
        "return {\n"
        "    exported: true,\n"
        "    path: exportFile.fsName,\n"
        "    documentName: doc.name,\n"
        "    documentSize: {width: doc.width, height: doc.height}\n"
        "};\n"
    )
    return _run(body)


# ---------------------------------------------------------------------------
# Scripting tools
# ---------------------------------------------------------------------------

@mcp.tool()
def illustrator_run_script(code: str) -> types.CallToolResult:
    """Execute arbitrary JSX (ExtendScript) code in Illustrator.

    The code runs inside a function wrapped in try/catch. Hand data back
    with ``return``; throw to report a failure.
    Example:
        var doc = app.activeDocument;
        return {name: doc.name, layers: doc.layers.length};

    Args:
        code: The JSX code to execute
    """
    return _run(code)


@mcp.tool()
def illustrator_eval_expression(expression: str) -> types.CallToolResult:
    """Evaluate a short ExtendScript expression and return it as a string.

    Use this for quick read-only queries like "app.documents.length".
    No wrapper or serialiser is applied.

    Args:
        expression: The expression to evaluate
    """
    return osa.format_result(osa.eval_expr(expression))


@mcp.tool()
def illustrator_undo(steps: int = 1) -> types.CallToolResult:
    """Undo the last operation(s) in Illustrator.

    Args:
        steps: Number of undo steps to perform (clamped to 1-50)
    """
    steps = max(1, min(steps, 50))
    body = (
        _REQUIRE_DOCUMENT
        + f"var steps = {js(steps)};\n"
        "var undone = 0;\n"
        "for (var i = 0; i < steps; i++) {\n"
        "    try {\n"
        "        app.undo();\n"
        "        undone++;\n"
        "    } catch (e) {\n"
        "        break;\n"
        "    }\n"
        "}\n"
        "return {stepsUndone: undone};\n"
    )
    return _run(body)


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def main():
    """Run the MCP server via stdio transport."""
    log.info("Starting Illustrator Exec MCP server (app=%s)", osa.APP_NAME)
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
