import unittest

from datacom_api import Client
from datacom_api.errors import ParamError

from live_test_config import require_live_tests


class LiveClientTest(unittest.TestCase):
    def setUp(self):
        require_live_tests()
        self.client = Client()

    def test_search_contact_without_params_has_results(self):
        self.assertGreater(self.client.search_contact().size, 0)

    def test_first_page_is_full(self):
        self.client.page_size = 5
        search = self.client.search_contact()
        self.assertEqual(len(search.page(1)), min(5, search.size))

    def test_page_size_limits(self):
        with self.assertRaises(ParamError):
            self.client.page_size = 101
