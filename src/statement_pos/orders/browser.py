"""Playwright implementation of the automation executor.

Portal markup is not stable, so every step tries a list of selectors and
uses the first one present on the page.
"""

from __future__ import annotations

import base64
import re
import time
from typing import Any, Dict, List, Optional

from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import Page, sync_playwright

from ..utils.logging import get_logger
from .automation import AutomationExecutor, AutomationRequest, AutomationResult

logger = get_logger(__name__)

DEFAULT_SELECTORS: Dict[str, Any] = {
    "username_inputs": ["#username", "[name='username']", "input[type='email']"],
    "password_inputs": ["#password", "[name='password']", "input[type='password']"],
    "login_buttons": ["button[type='submit']", ".login-button", "#login-btn"],
    "new_order": ["a[href*='order']", "button:has-text('New Order')", ".new-order-btn", "#create-order"],
    "order_form": ["form", ".order-form", ".pos-interface", ".order-interface"],
    "quantity_inputs": [
        "#{item}-qty",
        "[name='{item}']",
        "input[data-item='{item}']",
        ".{item}-input",
    ],
    "date_inputs": ["input[type='date']", "#order-date", "[name='date']"],
    "submit_buttons": [
        "button[type='submit']",
        ".submit-order",
        "#submit-btn",
        "button:has-text('Submit')",
        "button:has-text('Create Order')",
    ],
    "order_id": [".order-id", "#order-number", "[data-order-id]"],
}

# Portal field slugs for each item kind.
ITEM_SLUGS = {
    "full_plate": "full-plate",
    "half_plate": "half-plate",
    "water": "water",
    "packing": "packing",
}

ORDER_ID_PATTERN = re.compile(r"Order\s+(?:ID|#)?\s*:?\s*(\w+)", re.IGNORECASE)


def first_usable_locator(page: Page, selectors: List[str], timeout_ms: int = 0) -> Optional[str]:
    for selector in selectors:
        try:
            if timeout_ms:
                page.wait_for_selector(selector, timeout=timeout_ms)
            if page.locator(selector).count() > 0:
                return selector
        except PlaywrightError:
            continue
    return None


class PlaywrightAutomationExecutor(AutomationExecutor):
    def __init__(self, selectors: Optional[Dict[str, Any]] = None, step_timeout_ms: int = 5000) -> None:
        self.selectors = dict(DEFAULT_SELECTORS)
        if selectors:
            self.selectors.update(selectors)
        self.step_timeout_ms = step_timeout_ms

    def create_order(self, request: AutomationRequest) -> AutomationResult:
        txn = request.transaction
        logger.info("Automating order for %s (%s)", txn.id, txn.paid_amount)
        browser = None
        page = None
        try:
            with sync_playwright() as playwright:
                try:
                    browser = playwright.chromium.launch(
                        headless=request.headless,
                        args=["--no-sandbox", "--disable-setuid-sandbox"],
                    )
                    page = browser.new_page(viewport={"width": 1920, "height": 1080})
                    page.set_default_timeout(request.timeout_ms)
                    page.goto(request.credentials.portal_url)
                    self._login(page, request)
                    self._open_order_form(page)
                    self._fill_order(page, request)
                    order_id = self._submit(page)
                    return AutomationResult(success=True, order_id=order_id, screenshot=self._screenshot(page))
                except PlaywrightError as exc:
                    logger.error("Automation failed for %s: %s", txn.id, exc)
                    screenshot = self._screenshot(page) if page is not None else None
                    return AutomationResult(success=False, error=str(exc), screenshot=screenshot)
                finally:
                    if browser is not None:
                        browser.close()
        except PlaywrightError as exc:
            # Driver start-up or shutdown failed
            logger.error("Automation failed for %s: %s", txn.id, exc)
            return AutomationResult(success=False, error=str(exc))

    def _require(self, page: Page, key: str) -> str:
        selector = first_usable_locator(page, self.selectors[key], timeout_ms=self.step_timeout_ms)
        if selector is None:
            raise PlaywrightError(f"No element found for {key}")
        return selector

    def _login(self, page: Page, request: AutomationRequest) -> None:
        creds = request.credentials
        page.locator(self._require(page, "username_inputs")).first.fill(creds.username)
        page.locator(self._require(page, "password_inputs")).first.fill(creds.password)
        page.locator(self._require(page, "login_buttons")).first.click()
        page.wait_for_load_state("networkidle")
        logger.info("Logged in to %s", creds.portal_url)

    def _open_order_form(self, page: Page) -> None:
        selector = first_usable_locator(page, self.selectors["new_order"], timeout_ms=self.step_timeout_ms)
        if selector:
            page.locator(selector).first.click()
        self._require(page, "order_form")

    def _fill_order(self, page: Page, request: AutomationRequest) -> None:
        txn = request.transaction
        for kind, slug in ITEM_SLUGS.items():
            quantity = getattr(txn, kind)
            if quantity <= 0:
                continue
            candidates = [s.format(item=slug) for s in self.selectors["quantity_inputs"]]
            selector = first_usable_locator(page, candidates, timeout_ms=3000)
            if selector is None:
                logger.warning("Could not find quantity input for %s", slug)
                continue
            page.locator(selector).first.fill(str(quantity))
            logger.debug("Set %s quantity to %d", slug, quantity)

        selector = first_usable_locator(page, self.selectors["date_inputs"], timeout_ms=3000)
        if selector:
            page.locator(selector).first.evaluate(
                "(el, value) => { el.value = value; el.dispatchEvent(new Event('change', { bubbles: true })); }",
                txn.date,
            )

    def _submit(self, page: Page) -> str:
        page.locator(self._require(page, "submit_buttons")).first.click()
        page.wait_for_load_state("networkidle")

        for selector in self.selectors["order_id"]:
            locator = page.locator(selector)
            if locator.count() > 0:
                text = (locator.first.text_content() or "").strip()
                if text:
                    return text
        match = ORDER_ID_PATTERN.search(page.inner_text("body"))
        if match:
            return match.group(1)
        return f"AUTO-{int(time.time() * 1000)}"

    @staticmethod
    def _screenshot(page: Page) -> Optional[str]:
        try:
            return base64.b64encode(page.screenshot(full_page=True)).decode("ascii")
        except PlaywrightError as exc:
            logger.warning("Screenshot failed: %s", exc)
            return None
