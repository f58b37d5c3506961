from flask import Flask, jsonify, request
from werkzeug.exceptions import HTTPException

from order_pro.config import Config
from order_pro.observability import (
    configure_json_logging,
    ensure_request_id,
    mark_request_start,
    metrics_snapshot,
    observe_response,
    prometheus_metrics_text,
)
from order_pro.runtime import get_store, init_marketplace
from order_pro.security import apply_security_headers, enforce_rate_limit


_HTTP_ERROR_CODES = {
    404: "route_not_found",
    405: "method_not_allowed",
}


def create_app(config_class=Config, store=None):
    app = Flask(__name__)
    # Instantiating runs the production secret guard in Config.__init__.
    app.config.from_object(config_class() if isinstance(config_class, type) else config_class)
    configure_json_logging(app)

    init_marketplace(app, store=store)
    _register_error_handlers(app)
    _register_security(app)
    _register_blueprints(app)
    _register_health(app)
    return app


def _register_blueprints(app: Flask) -> None:
    from order_pro.routes.admin_routes import admin_bp
    from order_pro.routes.auth_routes import auth_bp
    from order_pro.routes.marketplace_routes import marketplace_bp

    app.register_blueprint(auth_bp)
    app.register_blueprint(marketplace_bp)
    app.register_blueprint(admin_bp)


def _register_error_handlers(app: Flask) -> None:
    from order_pro.errors import AppError, SystemError

    @app.before_request
    def _ensure_request_id() -> None:
        ensure_request_id()
        mark_request_start()

    @app.after_request
    def _append_request_id(response):
        response.headers["X-Request-Id"] = ensure_request_id()
        response = observe_response(response)
        return apply_security_headers(response)

    def _log_error(error: AppError, request_id: str) -> None:
        log_method = app.logger.error if error.critical else app.logger.warning
        log_method(
            "application_error",
            extra={
                "request_id": request_id,
                "error_code": error.code,
                "http_status": error.http_status,
                "message_key": error.message_key,
                "details": error.details,
                "request_path": request.path,
                "http_method": request.method,
            },
            exc_info=error.critical,
        )

    @app.errorhandler(AppError)
    def _handle_app_error(exc: AppError):
        request_id = ensure_request_id()
        _log_error(exc, request_id)
        return jsonify(exc.to_response_payload(request_id)), exc.http_status

    @app.errorhandler(HTTPException)
    def _handle_http_exception(exc: HTTPException):
        request_id = ensure_request_id()
        status = int(exc.code or 500)
        code = _HTTP_ERROR_CODES.get(status, "validation_error" if status < 500 else "unexpected_error")
        mapped = AppError(code=code, message_key=code, http_status=status, critical=False, details=exc.description)
        _log_error(mapped, request_id)
        return jsonify(mapped.to_response_payload(request_id)), status

    @app.errorhandler(Exception)
    def _handle_unexpected(exc: Exception):
        if isinstance(exc, HTTPException):
            return _handle_http_exception(exc)

        request_id = ensure_request_id()
        mapped = SystemError(
            code="unexpected_error",
            message_key="unexpected_error",
            http_status=500,
            critical=True,
            details=str(exc),
        )
        app.logger.exception(
            "unexpected_exception",
            extra={
                "request_id": request_id,
                "error_code": mapped.code,
                "request_path": request.path,
                "http_method": request.method,
            },
        )
        return jsonify(mapped.to_response_payload(request_id)), mapped.http_status


def _register_security(app: Flask) -> None:
    @app.before_request
    def _rate_limit_guard():
        return enforce_rate_limit()


def _register_health(app: Flask) -> None:
    @app.route("/health")
    def health():
        payload = {
            "status": "ok",
            "metrics": {
                "http": metrics_snapshot(),
            },
            "marketplace": get_store().stats(),
        }
        return payload, 200

    @app.route("/metrics")
    def metrics():
        body = prometheus_metrics_text(marketplace_stats=get_store().stats())
        return app.response_class(body, mimetype="text/plain; version=0.0.4")
