"""Unit tests for the OpenRouter provider and file storage."""

import json
import os
import tempfile
import unittest
from unittest.mock import MagicMock, patch

import requests

from core.config import SYSTEM_INSTRUCTION, STORAGE_KEY
from core.errors import (
    ConfigurationError, TransportError, EmptyResponseError, MalformedStructuredResponseError
)
from core.models import WordStore, default_words
from services.file_storage import FileStorage
from services.openrouter_provider import OpenRouterProvider, extract_content


def make_response(status: int = 200, body=None, text: str = None):
    response = MagicMock()
    response.status_code = status
    response.ok = 200 <= status < 300
    if body is not None:
        response.json.return_value = body
    else:
        response.json.side_effect = ValueError('No JSON')
    response.text = text if text is not None else json.dumps(body)
    return response


def chat_body(content, usage=None) -> dict:
    body = {'choices': [{'message': {'role': 'assistant', 'content': content}}]}
    if usage:
        body['usage'] = usage
    return body


class TestExtractContent(unittest.TestCase):

    def test_string_content(self):
        self.assertEqual(extract_content(chat_body('Hello')), 'Hello')

    def test_content_parts(self):
        parts = [{'type': 'text', 'text': 'Hel'}, 'lo', {'type': 'image'}]
        self.assertEqual(extract_content(chat_body(parts)), 'Hello')

    def test_missing_choices(self):
        self.assertEqual(extract_content({}), '')
        self.assertEqual(extract_content({'choices': []}), '')
        self.assertEqual(extract_content(chat_body(None)), '')


class TestOpenRouterProvider(unittest.TestCase):

    def setUp(self):
        self.provider = OpenRouterProvider('test-key', model_name='test-model',
                                           base_url='https://example.test/chat', timeout=12)
        self.post = MagicMock()
        self.provider.session.post = self.post

    def test_missing_key_fails_before_network(self):
        provider = OpenRouterProvider(None)
        provider.session.post = MagicMock()
        with self.assertRaises(ConfigurationError):
            provider.complete('hi')
        provider.session.post.assert_not_called()

    def test_request_shape(self):
        self.post.return_value = make_response(body=chat_body('  A story.  '))
        result = self.provider.complete('Write a story')

        self.assertEqual(result, 'A story.')
        args, kwargs = self.post.call_args
        self.assertEqual(args[0], 'https://example.test/chat')
        self.assertEqual(kwargs['timeout'], 12)
        self.assertEqual(kwargs['headers']['Authorization'], 'Bearer test-key')
        body = kwargs['json']
        self.assertEqual(body['model'], 'test-model')
        self.assertEqual(body['messages'], [
            {'role': 'system', 'content': SYSTEM_INSTRUCTION},
            {'role': 'user', 'content': 'Write a story'}
        ])
        self.assertNotIn('response_format', body)

    def test_structured_request(self):
        self.post.return_value = make_response(
            body=chat_body('{"isCorrect": true, "feedback": "Good."}')
        )
        result = self.provider.complete('Grade this', structured=True)
        self.assertEqual(result, {'isCorrect': True, 'feedback': 'Good.'})
        self.assertEqual(self.post.call_args.kwargs['json']['response_format'], {'type': 'json_object'})

    def test_structured_reply_in_code_fence(self):
        self.post.return_value = make_response(body=chat_body('```json\n{"a": 1}\n```'))
        self.assertEqual(self.provider.complete('x', structured=True), {'a': 1})

    def test_malformed_structured_reply(self):
        self.post.return_value = make_response(body=chat_body('I cannot do that.'))
        with self.assertRaises(MalformedStructuredResponseError) as ctx:
            self.provider.complete('x', structured=True)
        self.assertEqual(ctx.exception.raw, 'I cannot do that.')

    def test_error_status(self):
        self.post.return_value = make_response(status=401, body={}, text='{"error": "bad key"}')
        with self.assertRaises(TransportError) as ctx:
            self.provider.complete('x')
        self.assertEqual(ctx.exception.status, 401)
        self.assertIn('bad key', ctx.exception.body)

    def test_error_body_unreadable(self):
        response = MagicMock(status_code=502, ok=False)
        type(response).text = property(lambda self: (_ for _ in ()).throw(RuntimeError('closed')))
        self.post.return_value = response
        with self.assertRaises(TransportError) as ctx:
            self.provider.complete('x')
        self.assertEqual(ctx.exception.status, 502)
        self.assertEqual(ctx.exception.body, '')

    def test_connection_failure(self):
        self.post.side_effect = requests.Timeout('read timed out')
        with self.assertRaises(TransportError) as ctx:
            self.provider.complete('x')
        self.assertIsNone(ctx.exception.status)

    def test_empty_content(self):
        for body in [chat_body(''), chat_body('   '), {'choices': []}]:
            with self.subTest(body=body):
                self.post.return_value = make_response(body=body)
                with self.assertRaises(EmptyResponseError):
                    self.provider.complete('x')

    def test_non_json_body(self):
        self.post.return_value = make_response(text='<html>')
        with self.assertRaises(EmptyResponseError):
            self.provider.complete('x')

    def test_stats(self):
        usage = {'prompt_tokens': 10, 'completion_tokens': 5, 'total_tokens': 15}
        self.post.return_value = make_response(body=chat_body('ok', usage))
        self.provider.complete('x')
        self.post.return_value = make_response(status=500, body={}, text='oops')
        with self.assertRaises(TransportError):
            self.provider.complete('x')

        stats = self.provider.get_stats()
        self.assertEqual(stats['calls'], 2)
        self.assertEqual(stats['failures'], 1)
        self.assertEqual(stats['total_tokens'], 15)


class TestFileStorage(unittest.TestCase):

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp.cleanup)
        self.config_file = os.path.join(self.tmp.name, 'config.json')
        self.storage = FileStorage(config_file=self.config_file,
                                   state_dir=os.path.join(self.tmp.name, 'state'))

    def test_missing_config(self):
        self.assertEqual(self.storage.load_config(), {})

    def test_load_config(self):
        with open(self.config_file, 'w') as f:
            json.dump({'openrouter_api_key': 'abc'}, f)
        self.assertEqual(self.storage.load_config()['openrouter_api_key'], 'abc')

    def test_corrupt_config_reads_as_empty(self):
        for content in ['{garbage', '["not", "an", "object"]']:
            with self.subTest(content=content):
                with open(self.config_file, 'w') as f:
                    f.write(content)
                with self.assertLogs('services.file_storage', level='WARNING'):
                    self.assertEqual(self.storage.load_config(), {})

    def test_items_round_trip(self):
        self.assertIsNone(self.storage.get_item('k'))
        self.storage.set_item('k', 'v1')
        self.storage.set_item('other', 'x')
        self.storage.set_item('k', 'v2')
        reopened = FileStorage(config_file=self.config_file, state_dir=self.storage.state_dir)
        self.assertEqual(reopened.get_item('k'), 'v2')
        self.assertEqual(reopened.get_item('other'), 'x')

    def test_corrupt_file_reads_as_empty(self):
        os.makedirs(self.storage.state_dir)
        with open(self.storage._get_state_file(), 'w') as f:
            f.write('{garbage')
        self.assertIsNone(self.storage.get_item('k'))

    def test_word_store_survives_restart(self):
        store = WordStore.load(self.storage)
        store.add('Zeal', 'Great energy.', 'He worked with zeal.')
        restored = WordStore.load(self.storage)
        self.assertEqual(restored.list(), store.list())
        self.assertEqual(restored.list()[-1].word, 'Zeal')

    def test_word_store_corrupt_value_falls_back(self):
        self.storage.set_item(STORAGE_KEY, 'not json')
        with self.assertLogs('core.models', level='WARNING'):
            store = WordStore.load(self.storage)
        self.assertEqual(store.list(), default_words())


class TestResolveSetting(unittest.TestCase):

    def test_env_then_config_then_default(self):
        from cli.__main__ import resolve_setting
        with patch.dict(os.environ, {'OPENROUTER_MODEL': 'env-model'}):
            self.assertEqual(resolve_setting('OPENROUTER_MODEL', {'openrouter_model': 'cfg'},
                                             'openrouter_model', 'default'), 'env-model')
        with patch.dict(os.environ, {}, clear=True):
            self.assertEqual(resolve_setting('OPENROUTER_MODEL', {'openrouter_model': 'cfg'},
                                             'openrouter_model', 'default'), 'cfg')
            self.assertEqual(resolve_setting('OPENROUTER_MODEL', {}, 'openrouter_model', 'default'),
                             'default')


if __name__ == '__main__':
    unittest.main()
