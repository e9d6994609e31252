from datacom_api.responses.search import SearchBase, SearchCompany, SearchContact

__all__ = ["SearchBase", "SearchCompany", "SearchContact"]
