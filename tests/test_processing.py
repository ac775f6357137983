import pytest
from PIL import Image

from errors import InvalidConfigError
from models import AnalysisConfig, AnalysisMode, CountResult, D86Result
from processing import analyze_to_record, process_image, run_analysis


def test_run_analysis_dispatches(square_image):
    assert isinstance(run_analysis(square_image, AnalysisConfig(), "d86"), D86Result)
    assert isinstance(run_analysis(square_image, AnalysisConfig(), AnalysisMode.COUNT), CountResult)


def test_unknown_mode(square_image):
    with pytest.raises(InvalidConfigError):
        run_analysis(square_image, AnalysisConfig(), "histogram")


def test_process_image(tmp_path, three_squares_image):
    path = tmp_path / "dots.png"
    Image.fromarray(three_squares_image).save(path)

    image, result = process_image(path, AnalysisConfig(min_area=5), "count")
    assert image.shape == three_squares_image.shape
    assert result.count == 3


def test_record_reports_failure_as_data(black_image):
    record = analyze_to_record(black_image, AnalysisConfig(), "d86")
    assert record["ok"] is False
    assert record["error"]["kind"] == "EmptyImageError"
    assert "non-black" in record["error"]["message"]


def test_record_success(square_image):
    record = analyze_to_record(square_image, AnalysisConfig(hx=100, hy=100), "d86")
    assert record["ok"] is True
    assert record["result"]["shape"] == "Circle"


def test_black_image_counts_zero(black_image):
    # Counting has no energy requirement.
    assert run_analysis(black_image, AnalysisConfig(), "count").count == 0
