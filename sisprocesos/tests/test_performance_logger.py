# -*- coding: utf-8 -*-
"""
Tests del sistema de profiling
"""
import os

import pytest

from sisprocesos import performance_logger


@pytest.fixture
def profiling_on(monkeypatch):
    monkeypatch.setattr(performance_logger, 'ENABLE_PROFILING', True)


def test_decorator_counts_calls_and_keeps_result(profiling_on):
    @performance_logger.profile_function
    def suma(a, b):
        return a + b

    assert suma(2, 3) == 5
    assert suma(1, 1) == 2

    stats = performance_logger.get_function_stats()
    name = suma.__qualname__
    assert stats[name]['calls'] == 2
    assert suma.__name__ == 'suma'


def test_decorator_with_custom_name_records_failures(profiling_on):
    @performance_logger.profile_function(name='Operación que falla')
    def falla():
        raise RuntimeError('boom')

    with pytest.raises(RuntimeError):
        falla()

    assert performance_logger.get_function_stats()['Operación que falla']['calls'] == 1


def test_disabled_profiling_returns_original_function(monkeypatch):
    monkeypatch.setattr(performance_logger, 'ENABLE_PROFILING', False)

    def original():
        return 1

    assert performance_logger.profile_function(original) is original


def test_fast_calls_are_not_logged():
    performance_logger.record_call('rapida', 5)

    assert performance_logger.get_log_summary()['slow_functions']['exists'] is False


def test_slow_call_is_written_to_log(caplog):
    performance_logger.record_call('lenta', 800)

    path = os.path.join(performance_logger.LOGS_DIR, performance_logger.SLOW_FUNCTIONS_LOG)
    with open(path, encoding='utf-8') as f:
        content = f.read()

    assert '[CRÍTICO]' in content
    assert 'Función: lenta' in content
    assert 'lenta' in caplog.text
    assert performance_logger.get_log_summary()['slow_functions']['lines'] > 0


def test_stats_report_and_clear_logs():
    performance_logger.record_call('media', 100)
    performance_logger.record_call('media', 500)

    stats = performance_logger.get_function_stats()['media']
    assert stats == {'calls': 2, 'avg_time': 300.0, 'max_time': 500.0}

    performance_logger.write_function_stats_report()
    assert performance_logger.get_log_summary()['slow_functions']['exists']

    performance_logger.clear_logs()
    assert not performance_logger.get_log_summary()['slow_functions']['exists']


def test_log_write_errors_do_not_break_the_call(monkeypatch, tmp_path):
    blocker = tmp_path / 'archivo'
    blocker.write_text('no es carpeta')
    monkeypatch.setattr(performance_logger, 'LOGS_DIR', str(blocker))

    performance_logger.record_call('lenta', 900)

    assert performance_logger.get_function_stats()['lenta']['calls'] == 1
