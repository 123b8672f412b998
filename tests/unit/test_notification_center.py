"""Unit tests for the NotificationCenter."""

import asyncio

import pytest

from catalog_client.application.services import NotificationCenter
from catalog_client.domain.entities import NotificationLevel


@pytest.mark.asyncio
async def test_subscribers_receive_published_notifications():
    center = NotificationCenter()
    received = []

    async def consume():
        async for notification in center.subscribe():
            received.append(notification.message)

    task = asyncio.create_task(consume())
    await asyncio.sleep(0)
    assert center.subscriber_count == 1

    center.error("Reorder failed")
    center.success("Saved")
    await asyncio.sleep(0)
    await center.shutdown()
    await task

    assert received == ["Reorder failed", "Saved"]
    assert center.subscriber_count == 0


def test_history_is_bounded():
    center = NotificationCenter(history_size=2)
    center.info("one")
    center.info("two")
    center.warning("three")
    assert [n.message for n in center.history] == ["two", "three"]
    assert center.history[-1].level == NotificationLevel.WARNING


def test_notification_to_dict():
    center = NotificationCenter()
    data = center.error("boom").to_dict()
    assert data["level"] == "error"
    assert data["message"] == "boom"
    assert "created_at" in data
