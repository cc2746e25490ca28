"""
Remote retrieval of PMC articles through NCBI E-utilities.
"""

from __future__ import annotations

import logging
import time
from typing import Optional, Union

import requests

from ..utils.exceptions import NetworkError
from ..utils.validators import InputValidator


log = logging.getLogger(__name__)

EFETCH_URL = "https://eutils.ncbi.nlm.nih.gov/entrez/eutils/efetch.fcgi"


def fetch_article_xml(pmc_id: Union[str, int], delay: float = 0.0, timeout: float = 30,
                      base_url: str = EFETCH_URL, session: Optional[requests.Session] = None) -> str:
    """
    Fetch the JATS XML of an article from PubMed Central.

    For batch jobs pass a delay between requests that honours the NCBI
    guidelines for high-volume retrieval.

    Args:
        pmc_id: PMC identifier, with or without the "PMC" prefix
        delay: Seconds to wait before connecting
        timeout: Request timeout in seconds
        base_url: efetch endpoint
        session: Optional requests session to reuse connections

    Returns:
        Article XML as text

    Raises:
        ValidationError: If the identifier is malformed
        NetworkError: If the request fails
    """
    numeric_id = InputValidator.validate_pmc_id(pmc_id)

    if delay > 0:
        time.sleep(delay)

    params = {"db": "pmc", "id": numeric_id}
    getter = session.get if session is not None else requests.get
    try:
        response = getter(base_url, params=params, timeout=timeout)
    except requests.RequestException as e:
        raise NetworkError(f"Failed to fetch PMC{numeric_id}: {e}", base_url)

    if response.status_code != 200:
        raise NetworkError(f"Failed to fetch PMC{numeric_id}", base_url,
                           response.status_code, response.text or "")

    log.info(f"Fetched PMC{numeric_id} ({len(response.content)} bytes)")
    return response.text
