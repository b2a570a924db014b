"""
Tests for the HTTP adapter.
"""

import pytest

from supportbot.chatbot.scheduler import ManualScheduler
from supportbot.config.config_manager import Settings
from supportbot.main import create_app


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def client(scheduler):
    app = create_app(Settings(), scheduler=scheduler)
    app.testing = True
    return app.test_client()


def deliver(scheduler):
    scheduler.advance(Settings().conversation.response_delay_ms)


class TestChatEndpoint:

    def test_chat_round_trip(self, client, scheduler):
        response = client.post('/chat', json={'message': 'Where is my order?'})

        assert response.status_code == 202
        assert response.get_json()['message']['role'] == 'user'
        assert response.get_json()['status'] == 'awaiting_response'

        deliver(scheduler)
        messages = client.get('/messages').get_json()['messages']

        assert len(messages) == 3
        assert messages[-1]['intent'] == 'order_tracking'

    @pytest.mark.parametrize("payload", [{}, {'message': ''}, {'message': '   '}, {'message': 5}])
    def test_blank_message(self, client, payload):
        response = client.post('/chat', json=payload)

        assert response.status_code == 400
        assert len(client.get('/messages').get_json()['messages']) == 1

    def test_busy_conversation(self, client):
        client.post('/chat', json={'message': 'track'})
        response = client.post('/chat', json={'message': 'refund'})

        assert response.status_code == 409
        assert response.get_json()['category'] == 'conflict'


class TestQuickReplies:

    def test_list(self, client):
        replies = client.get('/quick-replies').get_json()['quick_replies']
        assert replies[-1] == 'Billing questions'

    def test_submit(self, client, scheduler):
        response = client.post('/quick-replies/4')
        assert response.status_code == 202
        assert response.get_json()['message']['content'] == 'Billing questions'

        deliver(scheduler)
        assert client.get('/messages').get_json()['messages'][-1]['intent'] == 'billing'

    def test_unknown_index(self, client):
        assert client.post('/quick-replies/99').status_code == 404


class TestResetAndAnalytics:

    def test_reset_discards_pending_reply(self, client, scheduler):
        client.post('/chat', json={'message': 'I want a refund'})

        response = client.post('/reset')
        deliver(scheduler)

        assert response.status_code == 200
        assert response.get_json()['message']['intent'] == 'greeting'
        messages = client.get('/messages').get_json()['messages']
        assert [m['intent'] for m in messages] == ['greeting']

        status = client.get('/status').get_json()
        assert status['status'] == 'idle'
        assert status['epoch'] == 1

    def test_analytics(self, client, scheduler):
        for text in ['I want a refund', 'return this', 'asdkjhasd']:
            client.post('/chat', json={'message': text})
            deliver(scheduler)

        report = client.get('/analytics?top_k=1').get_json()

        assert report['total_messages'] == 7
        assert report['user_message_count'] == 3
        assert report['agent_message_count'] == 4
        assert report['top_intents'] == [{'intent': 'returns', 'count': 2, 'percentage': 50.0}]
        assert report['performance']['derived'] is False

    @pytest.mark.parametrize("top_k", ['0', '-3', 'many'])
    def test_invalid_top_k(self, client, top_k):
        assert client.get(f'/analytics?top_k={top_k}').status_code == 400
