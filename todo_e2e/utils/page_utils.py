# utils/page_utils.py
import logging
from typing import Dict, List

from selenium.common.exceptions import StaleElementReferenceException, WebDriverException
from selenium.webdriver.common.by import By

logger = logging.getLogger(__name__)

SUBMIT_SELECTORS = [
    (By.CSS_SELECTOR, 'button[type="submit"]'),
    (By.CSS_SELECTOR, 'input[type="submit"]'),
    (By.XPATH, '//form//button[not(@type="button")]'),
]


def current_url(driver) -> str:
    try:
        return driver.current_url
    except WebDriverException:
        return ''


def page_title(driver) -> str:
    try:
        return driver.title
    except WebDriverException:
        return ''


def page_source(driver) -> str:
    try:
        return driver.page_source
    except WebDriverException:
        return ''


def element_texts(elements) -> List[str]:
    texts = []
    for element in elements:
        try:
            texts.append(element.text.strip())
        except StaleElementReferenceException:
            continue
    return texts


def is_invalid_field(driver, element) -> bool:
    """True when the browser's constraint validation rejects the field."""
    try:
        message = driver.execute_script('return arguments[0].validationMessage;', element)
    except WebDriverException as e:
        logger.debug(f"Could not read validation message: {e}")
        return False
    return bool(message)


def xpath_literal(text: str) -> str:
    if "'" not in text:
        return f"'{text}'"
    if '"' not in text:
        return f'"{text}"'
    parts = text.split("'")
    return 'concat(' + ', "\'", '.join(f"'{part}'" for part in parts) + ')'


def snapshot(driver) -> Dict[str, str]:
    """URL and title of whatever the browser shows right now."""
    return {'url': current_url(driver), 'title': page_title(driver)}
