import pytest

from pos_sucursales import performance_logger as perf


@pytest.fixture
def profiling(tmp_path, monkeypatch):
    monkeypatch.setattr(perf, 'ENABLE_PROFILING', True)
    monkeypatch.setattr(perf, 'PERFORMANCE_LOG', str(tmp_path / 'performance.log'))
    monkeypatch.setattr(perf, 'SLOW_ROUTES_LOG', str(tmp_path / 'slow_routes.log'))
    monkeypatch.setattr(perf, 'SLOW_FUNCTIONS_LOG', str(tmp_path / 'slow_functions.log'))
    perf.reset_stats()
    yield tmp_path
    perf.reset_stats()


def test_profile_function_collects_stats(profiling):
    @perf.profile_function(name='Confirmar venta')
    def work(x):
        return x * 2

    assert work(2) == 4
    assert work(3) == 6

    stats = perf.get_function_stats()['Confirmar venta']
    assert stats['calls'] == 2
    assert stats['max_ms'] >= stats['avg_ms'] >= 0
    assert not (profiling / 'slow_functions.log').exists()


def test_slow_calls_are_written(profiling, monkeypatch):
    monkeypatch.setattr(perf, 'THRESHOLD_WARNING', 0)

    @perf.profile_function
    def work():
        return 'ok'

    work()
    text = (profiling / 'slow_functions.log').read_text(encoding='utf-8')
    assert '[WARNING]' in text
    assert 'work' in text


def test_log_request_uses_action_names(profiling, monkeypatch):
    monkeypatch.setattr(perf, 'THRESHOLD_CRITICAL', 10)
    perf.log_request('api_carrito_confirmar', 'POST', '/api/carrito/confirmar', 25, '2')

    text = (profiling / 'performance.log').read_text(encoding='utf-8')
    assert 'Acción: Confirmar venta' in text
    assert 'Identidad: 2' in text
    slow = (profiling / 'slow_routes.log').read_text(encoding='utf-8')
    assert '[CRITICAL]' in slow
    assert 'umbral: 10 ms' in slow


def test_disabled_profiling_returns_function_unchanged(monkeypatch):
    monkeypatch.setattr(perf, 'ENABLE_PROFILING', False)

    def work():
        return 1

    assert perf.profile_function(work) is work
