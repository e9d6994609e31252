import logging
import os
from urllib.parse import urljoin

from datacom_api.config import get_runtime_defaults
from datacom_api.errors import ParamError, TokenFailError
from datacom_api.responses.search import SearchCompany, SearchContact
from datacom_api.service.opener import WebserviceOpener
from datacom_api.service.query_parameters import QueryParameters
from datacom_api.util.logging import log_structured_event

"""
Client for the Data.com Connect search API
==========================================

The client holds the API token and the paging settings that searches
are created with. It knows how to fetch one page of raw JSON; paging
through a whole result set is left to the search objects it returns.
"""

LOG = logging.getLogger(__name__)


class Client(object):
    """
    The entry point for searches
    ============================

    SYNOPSIS
    --------

    example::

        from datacom_api import Client

        client = Client("my-api-token")
        client.page_size = 100

        contacts = client.search_contact(company_name="Acme", title="engineer")
        print(contacts.size, "contacts,", contacts.total_pages, "pages")

        for contact, index in contacts.iter_with_index():
            print(index, contact["firstname"], contact["lastname"])

    Without an explicit token the C{DATA_COM_TOKEN} environment variable
    is used.
    """

    ENV_NAME_TOKEN = "DATA_COM_TOKEN"
    MIN_PAGE_SIZE = 1
    MAX_PAGE_SIZE = 100

    def __init__(
        self,
        api_token=None,
        *,
        base_uri=None,
        page_size=None,
        max_offset=None,
        opener=None,
        session=None,
        timeout=None,
        proxy_url=None,
        verify_tls=True,
    ):
        self._token = api_token or os.getenv(self.ENV_NAME_TOKEN)
        if not self._token:
            raise TokenFailError("No token set!")

        defaults = get_runtime_defaults().client_defaults
        self.base_uri = base_uri or defaults.base_uri
        self.max_offset = defaults.max_offset if max_offset is None else int(max_offset)
        self.size_only_page_size = defaults.size_only_page_size
        self._page_size = defaults.page_size
        if page_size is not None:
            self.page_size = page_size

        if opener is None:
            opener = WebserviceOpener(
                self._token,
                session=session,
                timeout=timeout,
                verify_tls=verify_tls,
                proxy_url=proxy_url,
            )
        self.opener = opener

    def __repr__(self):
        return "<%s base_uri=%s page_size=%d>" % (self.__class__.__name__, self.base_uri, self._page_size)

    @property
    def page_size(self):
        return self._page_size

    # Page size = 0 returns the records count only (small request)
    @page_size.setter
    def page_size(self, value):
        try:
            real_value = int(value)
        except (TypeError, ValueError):
            raise ParamError("page_size must be an integer, received %r" % (value,))

        if real_value < 0 or real_value > self.MAX_PAGE_SIZE:
            raise ParamError(
                "page_size must be between 0 and %d, received %d" % (self.MAX_PAGE_SIZE, real_value)
            )

        self._page_size = real_value

    def url_for(self, path):
        base = self.base_uri if self.base_uri.endswith("/") else self.base_uri + "/"
        return urljoin(base, path)

    def perform_request(self, path, params):
        query = QueryParameters(params)
        if LOG.isEnabledFor(logging.DEBUG):
            log_structured_event(LOG, logging.DEBUG, "search_request", path=path, params=query.to_dict())
        return self.opener.get_json(self.url_for(path), query.to_dict())

    def search_contact_raw_json(self, options=None):
        return self.perform_request(SearchContact.PATH, options or {})

    def search_company_raw_json(self, options=None):
        return self.perform_request(SearchCompany.PATH, options or {})

    def search_contact(self, **options):
        return SearchContact(self, options)

    def search_company(self, **options):
        return SearchCompany(self, options)
