# votoperu/routes.py

# JSON API for the voter-facing screens: candidate browsing, like/dislike,
# profile and personal statistics. Cursor, filter and edit state live in the
# Flask session; the components they call are stateless.

from flask import jsonify, request, session, current_app
from votoperu import app, limiter
from votoperu import notifications
from votoperu.browser import candidate_browser as browser
from votoperu.browser.candidate_browser import BrowsingState
from votoperu.database.models import PoliticalCategory
from votoperu.errors import (
    LoadError, NotFoundError, PersistenceError, StaleSelectionError, StoreTimeoutError,
)
from votoperu.operations.health_monitor import check_health
from votoperu.preferences import recorder
from votoperu.profile import aggregator
from votoperu.profile.edit_flow import InvalidTransition, ProfileEditFlow
from votoperu.security.input_validator import InputValidator
from votoperu.text import simplifier
from flask_jwt_extended import jwt_required, get_jwt_identity, unset_jwt_cookies

validator = InputValidator()

BROWSE_KEY = 'browse'
EDIT_KEY = 'profile_edit'
OWNER_KEY = 'owner'


# ------------------------------ Error handling ------------------------------

def _error_response(err, status):
    return jsonify({
        'error': type(err).__name__,
        'notifications': notifications.serialize([notifications.error(err.message)]),
    }), status


@app.errorhandler(LoadError)
def handle_load_error(err):
    return _error_response(err, 503)


@app.errorhandler(PersistenceError)
def handle_persistence_error(err):
    return _error_response(err, 503)


@app.errorhandler(StoreTimeoutError)
def handle_timeout_error(err):
    return _error_response(err, 504)


@app.errorhandler(NotFoundError)
def handle_not_found(err):
    return _error_response(err, 404)


@app.errorhandler(StaleSelectionError)
def handle_stale_selection(err):
    return _error_response(err, 409)


@app.errorhandler(InvalidTransition)
def handle_invalid_transition(err):
    return jsonify({'error': 'InvalidTransition', 'detail': str(err)}), 409


@app.errorhandler(ValueError)
def handle_bad_input(err):
    return jsonify({
        'error': 'ValidationError',
        'detail': str(err),
        'notifications': notifications.serialize([notifications.error('Datos inválidos')]),
    }), 400


# --------------------------------- Helpers ---------------------------------

def candidate_card(candidate):
    card = candidate.to_dict()
    card.update({
        'party_background': candidate.party_background or 'No disponible',
        'proposals_2026': candidate.proposals_2026 or 'No disponible',
        'has_proposals': bool(candidate.proposals_2026),
        'criminal_record': candidate.criminal_record or 'Sin antecedentes',
        'recent_news': list(candidate.recent_news or []),
        'projects': list(candidate.projects or []),
    })
    return card


def browse_view(state, filtered, notes=()):
    candidate = browser.current_item(filtered, state.cursor)
    return {
        'category': state.category,
        'cursor': state.cursor,
        'total': len(filtered),
        'position': browser.position_label(filtered, state.cursor),
        'candidate': candidate_card(candidate) if candidate else None,
        'empty_message': None if candidate else browser.empty_message(state.category),
        'notifications': notifications.serialize(notes),
    }


def bind_session(user_id):
    """Drop browsing and edit state left in the session by another user."""
    if session.get(OWNER_KEY) != user_id:
        session.pop(BROWSE_KEY, None)
        session.pop(EDIT_KEY, None)
        session[OWNER_KEY] = user_id


def load_filtered(state):
    candidates = browser.load_all()
    filtered = browser.apply_filter(state.category, candidates)
    if browser.current_item(filtered, state.cursor) is None:
        state.cursor = 0
    return filtered


def json_body():
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        raise ValueError("Expected a JSON object")
    return payload


def load_stats(user_id):
    return aggregator.load_stats(
        user_id,
        limit=current_app.config.get('STATS_TOP_N', aggregator.TOP_N),
        group_by=current_app.config.get('STATS_GROUP_BY', 'name'),
    )


def profile_view(user_id, profile, flow):
    stats = load_stats(user_id)
    return {
        'profile': profile.to_dict(),
        'edit': flow.to_session(),
        'stats': stats.to_dict(),
    }


# --------------------------------- Browsing ---------------------------------

@app.route('/api/categories')
@jwt_required()
def categories():
    items = [{'value': browser.ALL_CATEGORIES, 'label': 'Todas las categorías'}]
    items.extend({'value': c.value, 'label': c.label} for c in PoliticalCategory)
    return jsonify(items)


@app.route('/api/browse')
@jwt_required()
def browse():
    bind_session(get_jwt_identity())
    state = BrowsingState.from_session(session.get(BROWSE_KEY))
    filtered = load_filtered(state)
    session[BROWSE_KEY] = state.to_session()
    return jsonify(browse_view(state, filtered))


@app.route('/api/browse/filter', methods=['POST'])
@jwt_required()
def select_category():
    bind_session(get_jwt_identity())
    state = BrowsingState.from_session(session.get(BROWSE_KEY))
    state.select_category(json_body().get('category', browser.ALL_CATEGORIES))
    filtered = load_filtered(state)
    session[BROWSE_KEY] = state.to_session()
    return jsonify(browse_view(state, filtered))


@app.route('/api/browse/interaction', methods=['POST'])
@jwt_required()
@limiter.limit("120/minute")
def record_interaction():
    user_id = get_jwt_identity()
    bind_session(user_id)
    payload = json_body()
    candidate_id = payload.get('candidate_id')
    if not validator.validate_id(candidate_id):
        raise ValueError("candidate_id must be a candidate identifier")

    state = BrowsingState.from_session(session.get(BROWSE_KEY))
    filtered = load_filtered(state)
    current = browser.current_item(filtered, state.cursor)
    if current is None or current.id != candidate_id:
        raise StaleSelectionError(f"{candidate_id} is not the candidate at cursor {state.cursor}")

    # Raises before the cursor moves if the write fails
    notes = [recorder.record(user_id, candidate_id, payload.get('type'))]
    if state.step(len(filtered)):
        notes.append(notifications.info('Has revisado todos los candidatos en esta categoría'))
    session[BROWSE_KEY] = state.to_session()
    return jsonify(browse_view(state, filtered, notes))


@app.route('/api/candidates/<candidate_id>/proposals')
@jwt_required()
def proposals(candidate_id):
    candidate = browser.load_one(candidate_id)
    if candidate is None:
        raise NotFoundError(f"No candidate {candidate_id}", message="Candidato no encontrado")
    simplified = request.args.get('simplified', 'false').lower() in ('1', 'true', 'yes')
    text = candidate.proposals_2026
    if simplified:
        text = simplifier.simplify(text, current_app.config.get('TEXT_SIMPLIFIER', 'identity'))
    return jsonify({
        'candidate_id': candidate.id,
        'simplified': simplified,
        'proposals_2026': text or 'No disponible',
    })


# --------------------------------- Profile ---------------------------------

@app.route('/api/profile')
@jwt_required()
def profile():
    user_id = get_jwt_identity()
    bind_session(user_id)
    flow = ProfileEditFlow.from_session(session.get(EDIT_KEY))
    return jsonify(profile_view(user_id, aggregator.load_profile(user_id), flow))


@app.route('/api/profile/stats')
@jwt_required()
def profile_stats():
    return jsonify(load_stats(get_jwt_identity()).to_dict())


@app.route('/api/profile/edit', methods=['POST'])
@jwt_required()
def edit_profile():
    user_id = get_jwt_identity()
    bind_session(user_id)
    flow = ProfileEditFlow.from_session(session.get(EDIT_KEY))
    current = aggregator.load_profile(user_id)
    flow.edit(current)
    session[EDIT_KEY] = flow.to_session()
    return jsonify({'profile': current.to_dict(), 'edit': flow.to_session()})


@app.route('/api/profile/cancel', methods=['POST'])
@jwt_required()
def cancel_edit():
    bind_session(get_jwt_identity())
    flow = ProfileEditFlow.from_session(session.get(EDIT_KEY))
    flow.cancel()
    session[EDIT_KEY] = flow.to_session()
    return jsonify({'edit': flow.to_session()})


@app.route('/api/profile/save', methods=['POST'])
@jwt_required()
def save_profile():
    user_id = get_jwt_identity()
    bind_session(user_id)
    changes = validator.validate_profile_update(json_body())
    flow = ProfileEditFlow.from_session(session.get(EDIT_KEY))
    try:
        reloaded = flow.save(user_id, changes, aggregator.update_profile, aggregator.load_profile)
    finally:
        session[EDIT_KEY] = flow.to_session()
    view = profile_view(user_id, reloaded, flow)
    view['notifications'] = notifications.serialize([notifications.success('Perfil actualizado')])
    return jsonify(view)


@app.route('/logout', methods=['POST'])
def logout():
    session.clear()
    resp = jsonify({'logout': True})
    unset_jwt_cookies(resp)
    return resp


@app.route('/health')
def health():
    res = check_health()
    return jsonify(res), 200 if res['overall_ok'] else 503
