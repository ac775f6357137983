from flask import Flask, request, jsonify
from flask_cors import CORS
import base64
import io
import logging
import os
import sys

from annotation import annotate
from config import coerce_config
from errors import AnalysisError
from image_io import load_image_bytes
from models import AnalysisMode
from output import format_report, result_to_dict
from processing import run_analysis

from backend.models import (
    AnalysisParams, AnalysisResponse, ErrorDetail, ErrorResponse, HealthResponse
)

logger = logging.getLogger(__name__)


def _error(kind: str, message: str, status: int):
    body = ErrorResponse(error=ErrorDetail(kind=kind, message=message))
    return jsonify(body.model_dump(mode='json')), status


def _to_data_url(pil_image) -> str:
    buffer = io.BytesIO()
    pil_image.save(buffer, format='PNG')
    encoded = base64.b64encode(buffer.getvalue()).decode('ascii')
    return f"data:image/png;base64,{encoded}"


def create_app() -> Flask:
    """Create the Flask app serving the two analysis endpoints."""
    app = Flask(__name__)
    CORS(app)

    @app.route('/health', methods=['GET'])
    def health():
        """Health check endpoint"""
        body = HealthResponse(status='ok', message='Server is running')
        return jsonify(body.model_dump(mode='json')), 200

    @app.route('/api/analyze/<mode>', methods=['POST'])
    def analyze(mode: str):
        """Analyze an uploaded image in d86 or count mode"""
        try:
            analysis_mode = AnalysisMode(mode)
        except ValueError:
            return _error('InvalidConfigError', f'Unknown analysis mode: {mode}', 404)

        upload = request.files.get('image')
        if upload is None:
            return _error('ImageLoadError', 'No image uploaded (expected form field "image").', 400)

        try:
            params = AnalysisParams(**{k: v for k, v in request.form.items() if k in AnalysisParams.model_fields})
            config = coerce_config(params.model_dump(exclude_none=True))
            logger.info(f"Received {analysis_mode.value} request for {upload.filename}: {config}")

            image = load_image_bytes(upload.read())
            result = run_analysis(image, config, analysis_mode.value)
            annotated = annotate(image, result)

            response = AnalysisResponse(
                mode=analysis_mode,
                report=format_report(result),
                result=result_to_dict(result),
                image=_to_data_url(annotated),
            )
            logger.info(f"{analysis_mode.value} analysis of {upload.filename} completed")
            return jsonify(response.model_dump(mode='json')), 200

        except AnalysisError as e:
            logger.warning(f"{analysis_mode.value} analysis failed: {e.kind}: {e.message}")
            return _error(e.kind, e.message, 400)
        except Exception as e:
            logger.error(f"Unexpected error in {analysis_mode.value} analysis: {e}", exc_info=True)
            return _error('InternalError', str(e), 500)

    return app


def main():
    # Handle both script execution and PyInstaller exe execution
    if getattr(sys, 'frozen', False):
        base_dir = os.path.dirname(sys.executable)
    else:
        base_dir = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

    log_dir = os.path.join(base_dir, 'logs')
    os.makedirs(log_dir, exist_ok=True)
    log_file = os.path.join(log_dir, 'server.log')
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.FileHandler(log_file),
            logging.StreamHandler()
        ]
    )

    port = int(os.environ.get('DOT_ANALYZER_PORT', '5000'))
    logger.info("Starting Dot Analyzer Server...")
    logger.info(f"Server will be available at http://localhost:{port}")
    logger.info(f"Logs will be written to: {log_file}")
    create_app().run(host='0.0.0.0', port=port, debug=False)


if __name__ == '__main__':
    main()
