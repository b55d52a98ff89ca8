import os
import time
import uuid

import redis as redis_lib
from django.core.cache import cache
from django.db import connections
from django.db.utils import OperationalError
from django.http import JsonResponse

from .logger import get_logger

logger = get_logger(__name__).bind(component='common', layer='health')


def _redis_ping(url: str, timeout: float = 0.3):
    try:
        client = redis_lib.from_url(url, socket_connect_timeout=timeout, socket_timeout=timeout)
        pong = client.ping()
    except redis_lib.RedisError as e:
        logger.warning('Redis health check failed', error=str(e))
        return {'status': 'fail', 'error': str(e)}
    if not pong:
        logger.warning('Redis health check returned unexpected response')
        return {'status': 'fail'}
    return {'status': 'ok'}


def _db_check(alias='default'):
    started = time.time()
    try:
        connections[alias].cursor().execute('SELECT 1')
    except OperationalError as e:
        logger.warning('Database health check encountered operational error', alias=alias, error=str(e))
        return {'status': 'fail', 'error': str(e)}
    latency = round((time.time() - started) * 1000, 2)
    logger.debug('Database health check succeeded', alias=alias, latency_ms=latency)
    return {'status': 'ok', 'latency_ms': latency}


def _cache_check():
    """Round-trip a probe key through the default cache (carts live there)."""
    key = f'health:{uuid.uuid4().hex}'
    cache.set(key, '1', timeout=5)
    ok = cache.get(key) == '1'
    cache.delete(key)
    if not ok:
        logger.warning('Cache health check could not read back probe key')
        return {'status': 'fail', 'error': 'cache round-trip failed'}
    return {'status': 'ok'}


def live_health(request):
    """Liveness probe: process is up and can service requests."""
    return JsonResponse({'status': 'alive'})


def ready_health(request):
    """Readiness probe: database, cache and (when configured) Redis."""
    checks = {
        'database': _db_check(),
        'cache': _cache_check(),
    }
    redis_url = os.getenv('REDIS_URL')
    if redis_url:
        checks['redis'] = _redis_ping(redis_url)
    else:
        checks['redis'] = {'status': 'skipped', 'detail': 'REDIS_URL not set'}

    failing = [name for name, r in checks.items() if r.get('status') == 'fail']
    overall_status = 'ok' if not failing else 'degraded'
    logger.info('Readiness probe evaluated', status=overall_status, failing_components=failing)
    return JsonResponse(
        {'status': overall_status, 'checks': checks},
        status=200 if not failing else 503,
    )
