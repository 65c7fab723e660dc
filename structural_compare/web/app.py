"""
Web Interface for Structural Comparison
Compares a posted design frame with posted markup and stylesheet sources.
"""

import logging
import os

from flask import Flask, Response, jsonify, request
from pydantic import ValidationError

from structural_compare import __version__
from structural_compare.comparator.report_builder import ReportBuilder
from structural_compare.comparator.structure_comparator import compare_structures
from structural_compare.config.schema import (
    ComparisonOptions, NameMappingConfig, format_validation_errors,
)
from structural_compare.core.code_normalizer import normalize_code
from structural_compare.core.design_normalizer import normalize_design_frame
from structural_compare.exceptions import StructuralCompareError

logger = logging.getLogger(__name__)

app = Flask(__name__)
report_builder = ReportBuilder()


@app.route('/health')
def health():
    return jsonify({'status': 'ok', 'version': __version__})


@app.route('/compare', methods=['POST'])
def compare():
    """Compare one design frame with one markup/stylesheet pair."""
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        return jsonify({'error': 'Request body must be a JSON object'}), 400

    design = payload.get('design')
    markup = payload.get('markup')
    stylesheet = payload.get('stylesheet') or ''
    if not isinstance(design, dict):
        return jsonify({'error': 'design must be a design frame object'}), 400
    if not isinstance(markup, str) or not markup.strip():
        return jsonify({'error': 'markup must be a non-empty string'}), 400
    if not isinstance(stylesheet, str):
        return jsonify({'error': 'stylesheet must be a string'}), 400

    try:
        options = ComparisonOptions.model_validate(payload.get('options') or {})
        name_mapping = NameMappingConfig.model_validate(payload.get('nameMapping') or {}).to_name_mapping()
    except ValidationError as e:
        return jsonify({'error': 'Invalid options', 'details': format_validation_errors(e)}), 400

    try:
        design_elements = normalize_design_frame(design, name_mapping)
    except StructuralCompareError as e:
        return jsonify({'error': str(e)}), 400

    code = normalize_code(markup, stylesheet, name_mapping)
    if not code.ok:
        return jsonify({'error': 'Markup could not be parsed', 'parseError': code.parse_error}), 422

    outcome = compare_structures(design_elements, code.elements, options, name_mapping)
    outcome.screen = {
        'id': str(design.get('id', '')),
        'name': str(design.get('name', '')),
        'frame_id': str(design.get('id', '')),
    }

    if request.args.get('format') == 'markdown':
        return Response(report_builder.render_markdown(outcome), mimetype='text/markdown')
    return jsonify(outcome.to_dict())


if __name__ == '__main__':
    port = int(os.environ.get("PORT", 5000))
    app.run(host="0.0.0.0", port=port, debug=True)
