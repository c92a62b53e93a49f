import logging
import uuid
from datetime import datetime
from functools import wraps

from flask import Flask, render_template, request, redirect, url_for, session, flash

from pos_sucursales import config
from pos_sucursales.models import IDENTITY_SESSION_KEY, STORES, store_name

# Sistema de profiling interno
from pos_sucursales.performance_logger import init_profiling

# ═══════════════════════════════════════════════════════════════════════════
# CONTENEDOR DE DEPENDENCIAS - Servicios y Repositorios
# ═══════════════════════════════════════════════════════════════════════════
# Las rutas solo llaman a servicios; la lógica de negocio vive en services/.
# Cambiar el almacén (JSON / Supabase) no afecta las rutas.
# ═══════════════════════════════════════════════════════════════════════════
from pos_sucursales.app_container import get_container
from pos_sucursales.services.cart_service import CART_SESSION_KEY

logging.basicConfig(
    level=getattr(logging, config.LOG_LEVEL, logging.INFO),
    format='%(asctime)s %(levelname)s [%(name)s] %(message)s',
)
logger = logging.getLogger(__name__)

app = Flask(__name__)

init_profiling(app)

# ═══════════════════════════════════════════════════════════════════════════════
# CONFIGURACIÓN DE SESIONES
# ═══════════════════════════════════════════════════════════════════════════════
# La identidad activa y el carrito viven en la cookie de sesión (cliente).
if config.PRODUCTION_MODE and not config.SECRET_KEY:
    logger.warning("PRODUCTION_MODE activo sin POS_SECRET_KEY definida")

app.secret_key = config.SECRET_KEY or config.DEFAULT_SECRET

app.config.update(
    SESSION_COOKIE_HTTPONLY=True,      # Protege contra XSS
    SESSION_COOKIE_SECURE=config.PRODUCTION_MODE,
    SESSION_COOKIE_SAMESITE='Lax',     # Protección CSRF básica
    JSON_AS_ASCII=False,
)


# ═══════════════════════════════════════════════════════════════════════════════
# GUARDS DE IDENTIDAD
# ═══════════════════════════════════════════════════════════════════════════════

def _guard_rejection(message, category='warning'):
    if request.path.startswith('/api/'):
        return {"ok": False, "error": message}, 403
    flash(message, category)
    return redirect(url_for('login'))


def cashier_required(f):
    """La caja exige una sucursal concreta: sin identidad o 'admin' -> login."""
    @wraps(f)
    def wrapper(*args, **kwargs):
        if get_container().identity_service.cashier_store_id() is None:
            logger.info("Acceso a %s sin sucursal activa", request.path)
            return _guard_rejection("Selecciona una sucursal para usar la caja.")
        return f(*args, **kwargs)
    return wrapper


def admin_required(f):
    @wraps(f)
    def wrapper(*args, **kwargs):
        if not get_container().identity_service.is_admin():
            logger.info("Acceso denegado a %s (identidad %r)",
                        request.path, session.get(IDENTITY_SESSION_KEY))
            return _guard_rejection("Acceso denegado. Solo administradores.", 'danger')
        return f(*args, **kwargs)
    return wrapper


# ═══════════════════════════════════════════════════════════════════════════════
# CSRF Y CABECERAS DE SEGURIDAD
# ═══════════════════════════════════════════════════════════════════════════════

def generate_csrf_token():
    if 'csrf_token' not in session:
        session['csrf_token'] = uuid.uuid4().hex
    return session['csrf_token']


@app.context_processor
def inject_template_globals():
    return {
        'csrf_token': generate_csrf_token(),
        'stores': STORES,
        'store_name': store_name,
    }


@app.template_filter('money')
def format_money(amount):
    try:
        return f"${float(amount or 0):.2f}"
    except (TypeError, ValueError):
        return "$0.00"


@app.template_filter('fecha')
def format_date(value):
    """created_at ISO -> dd/mm/aaaa (vacío si no se puede leer)."""
    # Solo la parte de fecha: Postgres emite fracciones de 1 a 6 dígitos
    try:
        return datetime.strptime(str(value or '')[:10], '%Y-%m-%d').strftime('%d/%m/%Y')
    except ValueError:
        return ''


def verify_csrf(f):
    @wraps(f)
    def wrapper(*args, **kwargs):
        if request.method == 'POST':
            token = session.get('csrf_token')
            form_token = (
                request.form.get('csrf_token') or
                request.headers.get('X-CSRF-Token') or
                request.headers.get('X-CSRFToken')
            )
            if not form_token and request.is_json:
                json_data = request.get_json(silent=True) or {}
                form_token = json_data.get('csrf_token')

            if not token or not form_token or token != form_token:
                if request.path.startswith('/api/'):
                    return {"ok": False, "error": "CSRF token inválido"}, 403
                flash('Sesión expirada. Por favor intenta de nuevo.', 'warning')
                return redirect(url_for('login'))
        return f(*args, **kwargs)
    return wrapper


@app.after_request
def set_security_headers(response):
    response.headers['X-Frame-Options'] = 'DENY'
    response.headers['X-Content-Type-Options'] = 'nosniff'
    response.headers['Referrer-Policy'] = 'no-referrer-when-downgrade'
    if request.is_secure:
        response.headers['Strict-Transport-Security'] = 'max-age=31536000; includeSubDomains'
    return response


def _json_body():
    return request.get_json(silent=True) or request.form.to_dict()


# ═══════════════════════════════════════════════════════════════════════════════
# INGRESO / SALIDA
# ═══════════════════════════════════════════════════════════════════════════════

@app.route("/", methods=["GET", "POST"])
@verify_csrf
def login():
    identity_service = get_container().identity_service
    if request.method == "POST":
        result = identity_service.login(request.form.get("identity"))
        if not result["ok"]:
            flash(result["error"], "warning")
            return redirect(url_for("login"))
        return redirect(url_for(result["destination"]))
    return render_template(
        "login.html",
        options=identity_service.options(),
        selected=identity_service.current() or '1',
    )


@app.route("/logout")
def logout():
    get_container().identity_service.logout()
    session.pop(CART_SESSION_KEY, None)
    return redirect(url_for("login"))


# ═══════════════════════════════════════════════════════════════════════════════
# PUNTO DE VENTA
# ═══════════════════════════════════════════════════════════════════════════════

@app.route("/pos")
@cashier_required
def pos():
    container = get_container()
    store_id = container.identity_service.cashier_store_id()
    query = request.args.get('q', '')
    return render_template(
        "pos.html",
        products=container.catalog_service.search(query),
        query=query,
        cart=container.cart_service.get_cart(),
        store_id=store_id,
        store_label=store_name(store_id),
    )


@app.route("/api/productos", methods=["GET"])
@cashier_required
def api_productos():
    products = get_container().catalog_service.search(request.args.get('q', ''))
    return {"ok": True, "productos": products}


@app.route("/api/carrito/ver", methods=["GET"])
@cashier_required
def api_carrito_ver():
    return {"ok": True, "carrito": get_container().cart_service.get_cart()}


@app.route("/api/carrito/ajustar", methods=["POST"])
@cashier_required
@verify_csrf
def api_carrito_ajustar():
    """Body: {"product_id": int, "delta": int} (+1 agrega, -1 quita)."""
    data = _json_body()
    result = get_container().cart_service.adjust_quantity(
        data.get("product_id"), data.get("delta", 1)
    )
    if not result["ok"]:
        return result, 400
    return result


@app.route("/api/carrito/eliminar", methods=["POST"])
@cashier_required
@verify_csrf
def api_carrito_eliminar():
    result = get_container().cart_service.remove_item(_json_body().get("product_id"))
    if not result["ok"]:
        return result, 400
    return result


@app.route("/api/carrito/limpiar", methods=["POST"])
@cashier_required
@verify_csrf
def api_carrito_limpiar():
    return get_container().cart_service.clear_cart()


@app.route("/api/carrito/confirmar", methods=["POST"])
@cashier_required
@verify_csrf
def api_carrito_confirmar():
    """
    Confirma el carrito: crea la orden y sus líneas.
    SIEMPRE devuelve JSON.

    Respuesta:
    - success: true/false
    - order_id, total
    - mensaje | error
    """
    container = get_container()
    try:
        result = container.sales_service.finalize_sale(
            container.cart_service.get_cart_items(),
            container.identity_service.cashier_store_id(),
        )
    except Exception as e:
        logger.exception("Error inesperado al confirmar venta")
        return {"success": False, "error": f"Error interno: {e}"}, 500

    if not result["ok"]:
        body = {"success": False, "error": result["error"]}
        if "order_id" in result:
            body["order_id"] = result["order_id"]
        return body, 400

    # Limpiar carrito solo si la venta fue exitosa
    container.cart_service.clear_cart()
    return {
        "success": True,
        "order_id": result["order_id"],
        "total": result["total"],
        "mensaje": result["mensaje"],
    }


# ═══════════════════════════════════════════════════════════════════════════════
# PANEL DE ADMINISTRACIÓN
# ═══════════════════════════════════════════════════════════════════════════════

@app.route("/dashboard")
@admin_required
def dashboard():
    data = get_container().stats_service.build_dashboard(request.args.get('store'))
    return render_template("dashboard.html", **data)


@app.route("/api/dashboard", methods=["GET"])
@admin_required
def api_dashboard():
    data = get_container().stats_service.build_dashboard(request.args.get('store'))
    return {"ok": True, **data}


@app.route("/ventas/<int:order_id>/anular", methods=["POST"])
@admin_required
@verify_csrf
def cancel_sale(order_id):
    """El formulario solo envía confirmar=si tras el confirm() del navegador."""
    result = get_container().sales_service.cancel_sale(
        order_id, confirmed=request.form.get("confirmar") == "si"
    )
    if result["ok"]:
        flash(result["mensaje"], "success")
    else:
        flash(result["error"], "danger")
    return redirect(url_for("dashboard", store=request.form.get("store", "all")))
