"""
Unit tests for the integer channel
"""

import threading
import unittest

from channel import Channel, ChannelClosed, ChannelTimeout


class TestChannel(unittest.TestCase):

    def setUp(self):
        self.ch = Channel("test")

    def test_fifo_order(self):
        for v in (1, 2, 3):
            self.ch.send(v)
        self.assertEqual([self.ch.recv(), self.ch.recv(), self.ch.recv()], [1, 2, 3])

    def test_recv_after_close_drains_first(self):
        """Values sent before close() are still delivered"""
        self.ch.send(7)
        self.ch.close()
        self.assertEqual(self.ch.recv(), 7)
        with self.assertRaises(ChannelClosed):
            self.ch.recv()
        # Stays closed for later readers
        with self.assertRaises(ChannelClosed):
            self.ch.recv()

    def test_send_after_close(self):
        self.ch.close()
        with self.assertRaises(ChannelClosed):
            self.ch.send(1)

    def test_close_is_idempotent(self):
        self.ch.close()
        self.ch.close()
        self.assertTrue(self.ch.closed)

    def test_recv_timeout(self):
        """A timed read on an open channel is a timeout, not a close"""
        with self.assertRaises(ChannelTimeout):
            self.ch.recv(timeout=0.01)
        self.assertFalse(self.ch.closed)

    def test_recv_after_close_is_not_timeout(self):
        self.ch.close()
        with self.assertRaises(ChannelClosed) as ctx:
            self.ch.recv(timeout=0.01)
        self.assertNotIsInstance(ctx.exception, ChannelTimeout)

    def test_close_wakes_blocked_reader(self):
        """A reader blocked on an empty channel fails instead of hanging"""
        errors = []

        def reader():
            try:
                self.ch.recv()
            except ChannelClosed as e:
                errors.append(e)

        t = threading.Thread(target=reader)
        t.start()
        self.ch.close()
        t.join(timeout=5)
        self.assertFalse(t.is_alive())
        self.assertEqual(len(errors), 1)

    def test_cross_thread_delivery(self):
        received = []
        t = threading.Thread(target=lambda: received.append(self.ch.recv(timeout=5)))
        t.start()
        self.ch.send(42)
        t.join(timeout=5)
        self.assertEqual(received, [42])

    def test_drain(self):
        self.ch.send(1)
        self.ch.send(2)
        self.assertEqual(self.ch.drain(), [1, 2])
        self.assertEqual(self.ch.drain(), [])

    def test_drain_closed(self):
        self.ch.send(5)
        self.ch.close()
        self.assertEqual(self.ch.drain(), [5])
        with self.assertRaises(ChannelClosed):
            self.ch.recv()


if __name__ == '__main__':
    unittest.main()
