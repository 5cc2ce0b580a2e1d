"""
시간표 빌더 - 라우트 정의
"""
import logging
from flask import Blueprint, render_template, jsonify, request, session, flash, redirect, url_for, send_file

from services.reference_data import get_reference_cache
from services.request_expander import expand_requests
from services.scheduler_client import get_scheduler_client
from services.subject_form import build_subject
from services.subject_queue import UpsertOutcome
from services.workspace import get_workspace_registry, Workspace, WorkspaceRegistry
from utils.error_handlers import handle_errors
from utils.errors import ValidationError, NetworkError

logger = logging.getLogger(__name__)

main_bp = Blueprint('main', __name__)
api_bp = Blueprint('api', __name__, url_prefix='/api')

EMPTY_QUEUE_MESSAGE = 'Please add at least one subject to the queue'
REFERENCE_LOAD_ERROR = 'Failed to load reference data. Please refresh the page.'
GENERATION_ERROR = 'Failed to generate timetable. Please try again later.'
XLSX_MIMETYPE = 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'


def _current_workspace():
    """세션 쿠키의 작업 공간 키로 Workspace 조회 (없으면 생성)"""
    key = session.get('workspace_id')
    if not key:
        key = WorkspaceRegistry.new_key()
        session['workspace_id'] = key
    return get_workspace_registry().get(key)


def _existing_workspace():
    """조회 전용 요청용: 세션에 작업 공간이 없으면 등록하지 않은 빈 Workspace"""
    return get_workspace_registry().peek(session.get('workspace_id')) or Workspace()


def _subject_form_data():
    return {
        "name": request.form.get('subjectName', ''),
        "faculty": request.form.getlist('faculty'),
        "duration": request.form.get('duration'),
        "lecturesPerWeek": request.form.get('lecturesPerWeek'),
        "sectionScope": request.form.get('sectionScope'),
        "sections": request.form.getlist('sections'),
    }


def _upsert_message(outcome):
    if outcome is UpsertOutcome.UPDATED:
        return 'Subject updated in queue.', 'info'
    return 'Subject added to queue.', 'success'


def _generate(workspace):
    """큐 확장 → 백엔드 전송 → 결과 저장 (실패 시 이전 결과 유지)"""
    subjects = workspace.queue.list()
    if not subjects:
        raise ValidationError(EMPTY_QUEUE_MESSAGE)
    result = get_scheduler_client().generate_timetable(expand_requests(subjects))
    workspace.store_result(result)
    return result


# ===== 페이지 라우트 =====

@main_bp.route('/')
def index():
    cache = get_reference_cache()
    catalog = cache.ensure_loaded()
    workspace = _existing_workspace()
    projector = workspace.projector()

    selected_section = request.args.get('section', '')
    section_entries = projector.for_section(selected_section) if selected_section else None

    return render_template(
        'index.html',
        catalog=catalog,
        catalog_ready=cache.ready,
        catalog_error=REFERENCE_LOAD_ERROR if cache.last_error else None,
        subjects=[s.to_dict(catalog) for s in workspace.queue.list()],
        result=workspace.result,
        sections=projector.sections_present(),
        selected_section=selected_section,
        section_entries=section_entries,
    )


@main_bp.route('/subjects', methods=['POST'])
def submit_subject():
    cache = get_reference_cache()
    workspace = _current_workspace()
    try:
        candidate = build_subject(_subject_form_data(), cache.catalog, catalog_ready=cache.ready)
    except ValidationError as e:
        flash(str(e), 'warning')
        return redirect(url_for('main.index'))

    message, category = _upsert_message(workspace.queue.upsert(candidate))
    flash(message, category)
    return redirect(url_for('main.index'))


@main_bp.route('/subjects/<int:position>/remove', methods=['POST'])
def remove_subject(position):
    _existing_workspace().queue.remove(position)
    return redirect(url_for('main.index'))


@main_bp.route('/generate', methods=['POST'])
def generate():
    workspace = _current_workspace()
    try:
        _generate(workspace)
    except ValidationError as e:
        flash(str(e), 'warning')
    except NetworkError as e:
        logger.error(f"시간표 생성 실패: {e}")
        flash(GENERATION_ERROR, 'danger')
    else:
        flash('Timetable generated successfully!', 'success')
    return redirect(url_for('main.index'))


@main_bp.route('/reference-data/refresh', methods=['POST'])
def refresh_reference_data():
    try:
        get_reference_cache().refresh()
    except NetworkError:
        flash(REFERENCE_LOAD_ERROR, 'danger')
    else:
        flash('Reference data reloaded.', 'success')
    return redirect(url_for('main.index'))


@main_bp.route('/timetable/export')
def export_timetable():
    """선택한 섹션 시간표 엑셀 다운로드"""
    from services.excel_export import build_section_workbook, export_filename

    section_name = request.args.get('section', '').strip()
    workspace = _existing_workspace()
    if not section_name or workspace.result is None:
        flash('Generate a timetable and select a section before exporting.', 'warning')
        return redirect(url_for('main.index'))

    entries = workspace.projector().for_section(section_name)
    stream = build_section_workbook(section_name, entries)
    return send_file(stream, mimetype=XLSX_MIMETYPE, as_attachment=True,
                     download_name=export_filename(section_name))


# ===== API 라우트 =====

@api_bp.route('/reference-data', methods=['GET'])
@handle_errors
def get_reference_data():
    """현재 카탈로그 반환 (아직 로드에 성공하지 못했으면 다시 시도)"""
    cache = get_reference_cache()
    catalog = cache.ensure_loaded()
    if not cache.ready:
        raise NetworkError(cache.last_error or REFERENCE_LOAD_ERROR)
    return jsonify({"success": True, **catalog.to_dict()})


@api_bp.route('/reference-data/refresh', methods=['POST'])
@handle_errors
def reload_reference_data():
    catalog = get_reference_cache().refresh()
    return jsonify({"success": True, **catalog.to_dict()})


@api_bp.route('/queue', methods=['GET'])
@handle_errors
def get_queue():
    catalog = get_reference_cache().catalog
    subjects = _existing_workspace().queue.list()
    return jsonify({"success": True, "subjects": [s.to_dict(catalog) for s in subjects]})


@api_bp.route('/queue', methods=['POST'])
@handle_errors
def add_to_queue():
    """과목 추가 또는 같은 과목(이름 + 섹션 집합) 갱신"""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object.")

    cache = get_reference_cache()
    candidate = build_subject(data, cache.catalog, catalog_ready=cache.ready)
    queue = _current_workspace().queue
    outcome = queue.upsert(candidate)
    message, _ = _upsert_message(outcome)
    return jsonify({
        "success": True,
        "outcome": outcome.value,
        "message": message,
        "subjects": [s.to_dict(cache.catalog) for s in queue.list()],
    })


@api_bp.route('/queue/<int:position>', methods=['DELETE'])
@handle_errors
def delete_from_queue(position):
    catalog = get_reference_cache().catalog
    queue = _existing_workspace().queue
    queue.remove(position)
    return jsonify({"success": True, "subjects": [s.to_dict(catalog) for s in queue.list()]})


@api_bp.route('/queue/expanded', methods=['GET'])
@handle_errors
def get_expanded_queue():
    """백엔드로 보낼 페이로드 미리보기"""
    expanded = expand_requests(_existing_workspace().queue.list())
    return jsonify({"success": True, "requests": [r.to_dict() for r in expanded]})


@api_bp.route('/generate', methods=['POST'])
@handle_errors
def generate_timetable():
    workspace = _current_workspace()
    result = _generate(workspace)
    return jsonify({
        "success": True,
        **result.to_dict(),
        "sections": workspace.projector().sections_present(),
    })


@api_bp.route('/timetable/sections', methods=['GET'])
@handle_errors
def get_timetable_sections():
    return jsonify({"success": True, "sections": _existing_workspace().projector().sections_present()})


@api_bp.route('/timetable/sections/<path:section_name>', methods=['GET'])
@handle_errors
def get_section_timetable(section_name):
    entries = _existing_workspace().projector().for_section(section_name)
    return jsonify({
        "success": True,
        "section": section_name,
        "entries": [e.to_dict() for e in entries],
    })
