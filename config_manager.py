# config_manager.py

import configparser
import logging
import os
from typing import Dict, Optional

from dotenv import load_dotenv
from pydantic import ValidationError

from models import PagerDutyCredentials, ReportSettings

logger = logging.getLogger(__name__)


class ConfigurationError(Exception):
    """Raised when configuration cannot be loaded or is invalid. Always fatal."""


class MissingCredentialsError(ConfigurationError):
    """Raised when the PagerDuty API key or account email is missing or invalid."""


class ConfigManager:
    """
    Manages loading and accessing configuration from .env (for secrets)
    and an optional config.ini (for report tunables and extra region aliases).
    """
    def __init__(self, ini_file_path: str = 'config.ini', env_file_path: Optional[str] = None):
        # The .env file only pre-populates the environment; variables already set win.
        dotenv_path = env_file_path if env_file_path else os.path.join(os.getcwd(), '.env')
        if not os.path.exists(dotenv_path):
            logger.warning(f".env file not found at {dotenv_path}. Using system environment.")
        else:
            load_dotenv(dotenv_path=dotenv_path)
            logger.debug(f"Loaded environment from {dotenv_path}")

        self.config = configparser.ConfigParser(interpolation=None) # Disable interpolation
        if os.path.exists(ini_file_path):
            try:
                self.config.read(ini_file_path)
            except configparser.Error as e:
                logger.error(f"Malformed configuration file {ini_file_path}: {e}")
                raise ConfigurationError(f"Malformed configuration file {ini_file_path}: {e}") from e
            logger.info(f"Successfully loaded configuration from {ini_file_path}")
        else:
            logger.info(f"Configuration file {ini_file_path} not found. Using built-in report settings.")

        # --- PagerDuty Credentials (from .env / environment) ---
        self.pagerduty_api_key: Optional[str] = os.getenv('PAGERDUTY_API_KEY')
        self.pagerduty_email: Optional[str] = os.getenv('PAGERDUTY_EMAIL')

        # --- Report Settings (from config.ini) ---
        self.report_settings: ReportSettings = self._load_report_settings()

        self.credentials: PagerDutyCredentials = self._validate_credentials()

    def _load_region_aliases(self) -> Dict[str, str]:
        """
        Loads the optional [RegionAliases] section.
        Example: {'frankfurt': 'eu-central-1', 'eu (frankfurt)': 'eu-central-1'}
        """
        if not self.config.has_section('RegionAliases'):
            return {}
        return {
            alias.strip().lower(): region.strip()
            for alias, region in self.config.items('RegionAliases')
            if region.strip()
        }

    def _load_report_settings(self) -> ReportSettings:
        """Builds ReportSettings from [Report], falling back to the model defaults per key."""
        overrides = {}
        key_map = {
            'AlarmKeyword': 'alarm_keyword',
            'TitleKeyword': 'title_keyword',
            'TargetDimension': 'target_dimension',
            'AwsProfile': 'aws_profile',
            'DefaultRegion': 'default_region',
        }
        try:
            if self.config.has_option('Report', 'PageSize'):
                overrides['page_size'] = self.config.getint('Report', 'PageSize')
            for ini_key, field_name in key_map.items():
                if self.config.has_option('Report', ini_key):
                    overrides[field_name] = self.config.get('Report', ini_key).strip()
            overrides['region_aliases'] = self._load_region_aliases()
            return ReportSettings(**overrides)
        except (ValueError, ValidationError) as e:
            logger.error(f"Invalid [Report] settings: {e}")
            raise ConfigurationError(f"Invalid [Report] settings: {e}") from e

    def _validate_credentials(self) -> PagerDutyCredentials:
        """Validates that the PagerDuty credentials are present before any API call is made."""
        logger.info(
            f"PagerDuty: API key set={bool(self.pagerduty_api_key)}, "
            f"Email set={bool(self.pagerduty_email)}"
        )
        if not self.pagerduty_api_key or not self.pagerduty_email:
            raise MissingCredentialsError("Set PAGERDUTY_API_KEY and PAGERDUTY_EMAIL in environment or .env")
        try:
            return PagerDutyCredentials(api_key=self.pagerduty_api_key, email=self.pagerduty_email)
        except ValidationError as e:
            raise MissingCredentialsError(f"Invalid PagerDuty credentials: {e}") from e
