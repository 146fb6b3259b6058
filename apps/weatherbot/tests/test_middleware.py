"""Tests for request logging middleware."""

from django.test import TestCase


class RequestLogMiddlewareTests(TestCase):

    def test_logs_api_requests(self):
        with self.assertLogs('core.middleware', level='INFO') as logs:
            self.client.get('/api/health/')
        self.assertEqual(len(logs.output), 1)
        self.assertIn('GET /api/health/ -> 200', logs.output[0])

    def test_logs_rejected_queries_with_status(self):
        with self.assertLogs('core.middleware', level='INFO') as logs:
            self.client.get('/api/weather/')
        self.assertIn('-> 400', logs.output[0])
