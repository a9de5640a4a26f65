"""Test the single-page evaluation pipeline, loading and reports."""

import io
import json
import os
import sys

import numpy as np
import pytest

from layouteval.config import EVAL_CONFIG, REGION_COLORS
from layouteval.loading import load_image, load_regions, save_image, save_regions
from layouteval.main import evaluate_page, main
from layouteval.region import Region
from layouteval.report import print_metrics, print_metrics_verbose, print_set
from layouteval.vertex import Side

GREEN = REGION_COLORS["text"]
RED = REGION_COLORS["figure"]


@pytest.fixture
def page_files(tmp_path):
    """Hypothesis/groundtruth image and box files for one page."""
    image = np.full((30, 50, 3), 255, dtype=np.uint8)
    image[2:12, 2:12] = GREEN
    image[2:12, 30:40] = RED
    image[20:25, 5:10] = (0, 0, 0)

    paths = {
        "hyp_image": str(tmp_path / "page_hyp.png"),
        "gt_image": str(tmp_path / "page.png"),
        "hyp_boxes": str(tmp_path / "page_hyp.json"),
        "gt_boxes": str(tmp_path / "page_gt.json"),
    }
    save_image(image, paths["hyp_image"])
    save_image(image, paths["gt_image"])
    save_regions([Region(0, 0, 15, 15, label="text"), Region(30, 2, 10, 10, label="figure")],
                 paths["hyp_boxes"])
    save_regions([Region(2, 2, 10, 10, label="text"), Region(30, 2, 10, 10, label="figure")],
                 paths["gt_boxes"])
    return paths


def test_image_round_trip_keeps_colors(page_files):
    image = load_image(page_files["gt_image"])

    assert image.shape == (30, 50, 3)
    assert tuple(image[5, 5]) == GREEN
    assert tuple(image[5, 35]) == RED


def test_load_image_errors(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_image(str(tmp_path / "missing.png"))

    broken = tmp_path / "broken.png"
    broken.write_text("not an image")
    with pytest.raises(ValueError):
        load_image(str(broken))


def test_load_regions(page_files, tmp_path):
    regions = load_regions(page_files["gt_boxes"])

    assert regions == [Region(2, 2, 10, 10, label="text"),
                       Region(30, 2, 10, 10, label="figure")]

    not_a_list = tmp_path / "bad.json"
    not_a_list.write_text(json.dumps({"x": 1}))
    with pytest.raises(ValueError):
        load_regions(str(not_a_list))


def test_evaluate_page_by_type(page_files):
    graph = evaluate_page(page_files["hyp_image"], page_files["gt_image"],
                          page_files["hyp_boxes"], page_files["gt_boxes"],
                          region_type="text", verbose=False)

    assert len(graph.hypothesis) == 1
    assert graph.hyp_metrics.correct_segmentations == 1
    assert graph.hyp_metrics.total_true_positive_fg_pix == 100
    assert graph.input.name == "page"


def test_evaluate_page_any_type_with_debug_images(page_files, tmp_path):
    debug_dir = str(tmp_path / "debug")
    graph = evaluate_page(page_files["hyp_image"], page_files["gt_image"],
                          page_files["hyp_boxes"], page_files["gt_boxes"],
                          debug_dir=debug_dir, verbose=False)

    assert graph.hyp_metrics.correct_segmentations == 2
    assert graph.hyp_metrics.total_true_negative_fg_pix == 25
    assert sorted(os.listdir(debug_dir)) == ["page_any_gt_tracker.png",
                                             "page_any_hyp_tracker.png"]


def test_debug_images_outline_each_side(page_files, tmp_path):
    debug_dir = str(tmp_path / "debug")
    evaluate_page(page_files["hyp_image"], page_files["gt_image"],
                  page_files["hyp_boxes"], page_files["gt_boxes"],
                  region_type="text", debug_dir=debug_dir, verbose=False)

    image = load_image(os.path.join(debug_dir, "page_text_hyp_tracker.png"))

    assert tuple(image[0, 0]) == EVAL_CONFIG["hypothesis_box_color"]
    assert tuple(image[2, 2]) == EVAL_CONFIG["groundtruth_box_color"]
    assert EVAL_CONFIG["hypothesis_box_color"] != EVAL_CONFIG["groundtruth_box_color"]


def test_reports(page_files):
    graph = evaluate_page(page_files["hyp_image"], page_files["gt_image"],
                          page_files["hyp_boxes"], page_files["gt_boxes"],
                          verbose=False)

    stream = io.StringIO()
    print_metrics(graph, stream)
    summary = stream.getvalue()
    assert "LAYOUT EVALUATION: page (type: any)" in summary
    assert "Correct segmentations: 2" in summary

    stream = io.StringIO()
    print_metrics_verbose(graph, stream)
    assert "HYPOTHESIS REGIONS" in stream.getvalue()
    assert "Region 1: (30, 2) 10 x 10" in stream.getvalue()

    stream = io.StringIO()
    print_set(graph, Side.GROUNDTRUTH, stream)
    assert stream.getvalue().startswith("groundtruth set: 2 vertices")
    assert "-> hypothesis[0]" in stream.getvalue()


def test_reports_need_a_built_graph(page_files):
    graph = evaluate_page(page_files["hyp_image"], page_files["gt_image"],
                          page_files["hyp_boxes"], page_files["gt_boxes"],
                          verbose=False)
    graph.clear()

    with pytest.raises(ValueError, match="rebuild it first"):
        print_metrics(graph, io.StringIO())
    with pytest.raises(ValueError, match="rebuild it first"):
        print_metrics_verbose(graph, io.StringIO())


def test_command_line_json(page_files, monkeypatch, capsys):
    monkeypatch.setattr(sys, "argv", [
        "layouteval",
        "--hyp-image", page_files["hyp_image"],
        "--gt-image", page_files["gt_image"],
        "--hyp-boxes", page_files["hyp_boxes"],
        "--gt-boxes", page_files["gt_boxes"],
        "--type", "figure",
        "--json",
    ])

    main()
    result = json.loads(capsys.readouterr().out)

    assert result["hypothesis"]["correct_segmentations"] == 1
    assert result["hypothesis"]["res_type_name"] == "figure"
    assert result["groundtruth"]["total_fg_pixels"] == 100
