"""
Tests for health probes, request correlation and log sanitizing.
"""
import json
import logging
from unittest.mock import patch

import pytest
from django.http import HttpResponse
from django.test import RequestFactory

from apps.core.observability import events, log_domain_event
from apps.core.observability.correlation import RequestCorrelationMiddleware, get_request_id
from apps.core.observability.logging import CorrelationFilter, SanitizedJSONFormatter, sanitize_dict


@pytest.mark.django_db
class TestHealth:

    def test_healthz(self, client):
        response = client.get('/healthz')

        assert response.status_code == 200
        assert response.json()['status'] == 'ok'

    def test_readyz(self, client):
        response = client.get('/readyz')

        assert response.status_code == 200
        assert response.json()['checks'] == {'database': True, 'cache': True}


class TestCorrelation:

    def test_request_id_is_propagated(self):
        request = RequestFactory().get('/api/v1/consultations/', HTTP_X_REQUEST_ID='req-123')
        middleware = RequestCorrelationMiddleware(lambda req: HttpResponse())

        middleware.process_request(request)
        assert get_request_id() == 'req-123'
        response = middleware.process_response(request, HttpResponse())

        assert response['X-Request-ID'] == 'req-123'
        assert get_request_id() is None

    def test_request_id_is_generated(self):
        request = RequestFactory().get('/healthz')
        middleware = RequestCorrelationMiddleware(lambda req: HttpResponse())

        middleware.process_request(request)
        response = middleware.process_response(request, HttpResponse())

        assert response['X-Request-ID'] == request.request_id


class TestSanitizing:

    def test_sanitize_dict_redacts_nested(self):
        data = {
            'consultation_id': 'c1',
            'email': 'patient@test.com',
            'patient': {'full_name': 'Ana', 'id': 'p1'},
            'items': [{'token': 'abc'}],
        }

        assert sanitize_dict(data) == {
            'consultation_id': 'c1',
            'email': '[REDACTED]',
            'patient': {'full_name': '[REDACTED]', 'id': 'p1'},
            'items': [{'token': '[REDACTED]'}],
        }

    def test_formatter_outputs_json_without_pii(self):
        record = logging.LogRecord('test', logging.INFO, __file__, 1, 'Mail sent', None, None)
        record.email = 'patient@test.com'
        record.consultation_id = 'c1'
        CorrelationFilter().filter(record)

        payload = json.loads(SanitizedJSONFormatter().format(record))

        assert payload['message'] == 'Mail sent'
        assert payload['email'] == '[REDACTED]'
        assert payload['consultation_id'] == 'c1'
        assert 'request_id' in payload

    def test_event_logger_carries_correlation(self):
        assert any(isinstance(f, CorrelationFilter) for f in events.logger.filters)

    def test_domain_event_is_sanitized(self):
        with patch('apps.core.observability.events.logger') as logger:
            log_domain_event('consultation_booked', entity_type='Consultation', entity_id='c1', report='secret')

        extra = logger.info.call_args.kwargs['extra']
        assert extra['event'] == 'consultation_booked'
        assert extra['entity_id'] == 'c1'
        assert extra['report'] == '[REDACTED]'
