import io
import unittest

from tabbed.logger import Logger


class TestLogger(unittest.TestCase):

    def test_keeps_bounded_history(self):
        logger = Logger()
        for i in range(Logger.MAX_MESSAGES + 5):
            logger.log('message %s' % i)
        self.assertEqual(len(logger.messages), Logger.MAX_MESSAGES)
        self.assertEqual(logger.messages[0], 'message 5')

    def test_echo(self):
        echo = io.StringIO()
        logger = Logger(echo=echo)
        logger.log('Managing 0x100\n')
        self.assertEqual(echo.getvalue(), 'Managing 0x100\n')

    def test_dump(self):
        logger = Logger()
        logger.log('a')
        logger.log('b')
        out = io.StringIO()
        logger.dump(out)
        self.assertEqual(out.getvalue(), 'a\nb\n')


if __name__ == '__main__':
    unittest.main()
