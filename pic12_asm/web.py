"""
PIC12 Assembler - Flask Backend

Provides REST API endpoints for inspecting assembled programs: the packed
bytes, their binary rendering, a per-instruction listing and the label
table. Run with ``python -m pic12_asm.web``.
"""

import io
import os
from pathlib import Path

from flask import Flask, request, jsonify, send_file
from werkzeug.utils import secure_filename

from .assembler import Assembler
from .errors import AssemblerError
from .instructions import INSTRUCTIONS


app = Flask(__name__)
app.config['MAX_CONTENT_LENGTH'] = 1 * 1024 * 1024  # 1MB max upload
app.config['DEBUG'] = os.environ.get('FLASK_DEBUG', 'false').lower() == 'true'


def error_response(error: str, message: str, status: int = 400, **extra) -> tuple:
    """Create a standardized error response."""
    return jsonify({'error': error, 'message': message, **extra}), status


def require_file_upload() -> tuple | None:
    """Validate file upload and return error response if invalid, None if valid."""
    if 'file' not in request.files:
        return error_response('No file provided', 'Request must include a file field')
    if request.files['file'].filename == '':
        return error_response('No file selected', 'File field is empty')
    return None


def assemble_upload() -> Assembler:
    """Assemble the uploaded source file."""
    source = request.files['file'].read().decode('utf-8')
    strict = request.form.get('strict', 'false').lower() == 'true'
    asm = Assembler(strict=strict)
    asm.assemble_string(source)
    return asm


def output_name(filename: str) -> str:
    """Name of the .bin download for an uploaded source file."""
    stem = Path(secure_filename(filename)).stem
    return f"{stem or 'program'}.bin"


@app.after_request
def add_cors_headers(response):
    """Add CORS headers to all responses for local development."""
    response.headers['Access-Control-Allow-Origin'] = '*'
    response.headers['Access-Control-Allow-Methods'] = 'GET, POST, OPTIONS'
    response.headers['Access-Control-Allow-Headers'] = 'Content-Type'
    return response


@app.errorhandler(400)
def bad_request(error):
    return error_response('Bad request', str(error.description), 400)


@app.errorhandler(404)
def not_found(error):
    return error_response('Not found', str(error.description), 404)


@app.errorhandler(413)
def too_large(error):
    return error_response('File too large', str(error.description), 413)


@app.errorhandler(500)
def internal_error(error):
    return error_response('Internal server error', str(error.description), 500)


@app.route('/api/instructions', methods=['GET'])
def get_instructions():
    """Get the opcode table: prefix bits and encoded fields per mnemonic."""
    return jsonify({
        'instructions': [
            {
                'name': definition.name,
                'format': definition.format.name.lower(),
                'prefix': definition.prefix_string(),
                'operands': list(definition.operands),
                'fields': [{'name': name, 'bits': bits} for name, bits in definition.fields],
            }
            for definition in INSTRUCTIONS.values()
        ]
    })


@app.route('/api/assemble', methods=['POST', 'OPTIONS'])
def assemble():
    """Upload a source file and get the assembled program as JSON."""
    if request.method == 'OPTIONS':
        return '', 204

    file_error = require_file_upload()
    if file_error:
        return file_error

    try:
        asm = assemble_upload()
    except AssemblerError as e:
        return error_response('Assembly failed', str(e), line=e.line_num)
    except UnicodeDecodeError:
        return error_response('Invalid source file', 'Source must be UTF-8 text')

    output = asm.parse_output
    return jsonify({
        'success': True,
        'bytes': asm.get_hex_string(),
        'binary': asm.get_binary_string(),
        'bit_count': asm.bit_count,
        'listing': asm.get_listing_rows(),
        'labels': [
            {'name': name, 'target': target}
            for name, target in zip(output.labels, output.label_targets)
        ],
        'warnings': [str(warning) for warning in asm.warnings],
    })


@app.route('/api/assemble/bin', methods=['POST', 'OPTIONS'])
def assemble_bin():
    """Upload a source file and download the packed .bin output."""
    if request.method == 'OPTIONS':
        return '', 204

    file_error = require_file_upload()
    if file_error:
        return file_error

    try:
        asm = assemble_upload()
    except AssemblerError as e:
        return error_response('Assembly failed', str(e), line=e.line_num)
    except UnicodeDecodeError:
        return error_response('Invalid source file', 'Source must be UTF-8 text')

    return send_file(
        io.BytesIO(asm.data),
        mimetype='application/octet-stream',
        as_attachment=True,
        download_name=output_name(request.files['file'].filename),
    )


if __name__ == '__main__':
    port = int(os.environ.get('PORT', 5050))
    debug = os.environ.get('FLASK_DEBUG', 'false').lower() == 'true'

    print(f"Starting PIC12 Assembler service on port {port}")
    print(f"Debug mode: {debug}")

    app.run(host='127.0.0.1', port=port, debug=debug)
