"""Settings library for the timesheet and authentication configurations.

Provides:
    - Schema validation and enforcement for timesheet.json structure.
    - Loading and reading application settings.
    - Validation of the Google OAuth client_secret.json.
    - Environment variable overrides for the spreadsheet id and the OAuth client id.
"""

import json
import logging
import os
import pathlib
import shutil
from typing import Dict, Any, Optional, List

from PySide6 import QtCore, QtWidgets

from ..status import status

app_name: str = 'TimeSheet'

SPREADSHEET_ID_ENV_KEY: str = 'TIMESHEET_SPREADSHEET_ID'
CLIENT_ID_ENV_KEY: str = 'TIMESHEET_CLIENT_ID'

AUTH_STRATEGIES: List[str] = ['access_token', 'id_token']
WEEKDAY_SOURCES: List[str] = ['current_month', 'selected_month']
THEMES: List[str] = ['light', 'dark']

METADATA_KEYS: List[str] = [
    'name',
    'theme',
    'weekday_source',
]

CONFIG_SCHEMA: Dict[str, Any] = {
    'spreadsheet': {
        'type': dict,
        'required': True,
        'item_schema': {
            'id': {'type': str, 'required': True},
        }
    },
    'auth': {
        'type': dict,
        'required': True,
        'item_schema': {
            'strategy': {'type': str, 'required': True, 'allowed_values': AUTH_STRATEGIES},
        }
    },
    'metadata': {
        'type': dict,
        'required': True,
        'item_schema': {
            'name': {'type': str, 'required': True},
            'theme': {'type': str, 'required': True, 'allowed_values': THEMES},
            'weekday_source': {'type': str, 'required': True, 'allowed_values': WEEKDAY_SOURCES},
        }
    },
}


def _validate_section(section_name: str, section_dict: Dict[str, Any], item_schema: Dict[str, Any]) -> None:
    """Validate a section of the timesheet configuration against its item schema.

    Args:
        section_name: Name of the section, used in error messages.
        section_dict: The section data.
        item_schema: Mapping of field names to dicts with 'type', 'required' and
            optional 'allowed_values'.

    Raises:
        TypeError: If the section or a field has the wrong type.
        ValueError: If a required field is missing or a value is not allowed.
    """
    logging.debug(f'Validating "{section_name}" section.')
    if not isinstance(section_dict, dict):
        msg: str = f'"{section_name}" must be a dict.'
        logging.error(msg)
        raise TypeError(msg)

    for field, field_specs in item_schema.items():
        if field_specs['required'] and field not in section_dict:
            msg = f'"{section_name}" is missing "{field}".'
            logging.error(msg)
            raise ValueError(msg)
        if field not in section_dict:
            continue

        value = section_dict[field]
        if not isinstance(value, field_specs['type']):
            msg = (
                f'"{section_name}" field "{field}" must be {field_specs["type"]}, '
                f'got {type(value)}.'
            )
            logging.error(msg)
            raise TypeError(msg)

        allowed = field_specs.get('allowed_values')
        if allowed and value not in allowed:
            msg = f'"{section_name}" field "{field}" must be one of {allowed}, got "{value}".'
            logging.error(msg)
            raise ValueError(msg)


class ConfigPaths:
    """Manage application file paths and ensure default templates and directories exist.

    Template files ship inside the package; user copies live in the app data
    directory and are seeded from the templates on first run. Credentials are
    never written to disk.
    """

    def __init__(self) -> None:
        QtWidgets.QApplication.setApplicationName(app_name)
        QtWidgets.QApplication.setOrganizationName('')
        logging.debug(f'Setting application name: {app_name}')

        p = QtCore.QStandardPaths.writableLocation(QtCore.QStandardPaths.AppDataLocation)
        app_data_dir = pathlib.Path(p)
        logging.debug(f'Using app data directory: {app_data_dir}')

        self.template_dir: pathlib.Path = pathlib.Path(__file__).parent.parent / 'config'
        self.client_secret_template: pathlib.Path = self.template_dir / 'client_secret.json.template'
        self.config_template: pathlib.Path = self.template_dir / 'timesheet.json.template'
        self.stylesheet_path: pathlib.Path = self.template_dir / 'stylesheet.qss'

        self.config_dir: pathlib.Path = app_data_dir / 'config'

        self.client_secret_path: pathlib.Path = self.config_dir / 'client_secret.json'
        self.config_path: pathlib.Path = self.config_dir / 'timesheet.json'

        self._verify_and_prepare()

    def _verify_and_prepare(self) -> None:
        """Verify templates exist and prepare the configuration directory and files.

        Raises:
            FileNotFoundError: If the template directory or a template file is missing.
        """
        logging.debug(f'Verifying required directories and templates in {self.template_dir}')
        if not self.template_dir.exists():
            msg: str = f'Missing template directory: {self.template_dir}'
            logging.error(msg)
            raise FileNotFoundError(msg)
        if not self.client_secret_template.exists():
            msg = f'Missing client_secret template: {self.client_secret_template}'
            logging.error(msg)
            raise FileNotFoundError(msg)
        if not self.config_template.exists():
            msg = f'Missing config template: {self.config_template}'
            logging.error(msg)
            raise FileNotFoundError(msg)

        if not self.config_dir.exists():
            logging.debug(f'Creating config directory: {self.config_dir}')
            self.config_dir.mkdir(parents=True, exist_ok=True)

        if not self.client_secret_path.exists():
            logging.debug(f'Copying default client_secret from template to {self.client_secret_path}')
            shutil.copy(self.client_secret_template, self.client_secret_path)
        if not self.config_path.exists():
            logging.debug(f'Copying default config from template to {self.config_path}')
            shutil.copy(self.config_template, self.config_path)


class SettingsAPI(ConfigPaths):
    """
    Provides read access to the timesheet.json sections and client_secret.json.
    """
    required_client_secret_keys: List[str] = ['client_id', 'project_id', 'client_secret', 'auth_uri', 'token_uri']

    def __init__(self, config_path: Optional[str] = None, client_secret_path: Optional[str] = None) -> None:
        """Initialize SettingsAPI and load config and client_secret data.

        Args:
            config_path: Optional path to a custom timesheet.json file.
            client_secret_path: Optional path to a custom client_secret.json file.
        """
        super().__init__()

        self.config_path: pathlib.Path = pathlib.Path(config_path) if config_path else self.config_path
        self.client_secret_path: pathlib.Path = (
            pathlib.Path(client_secret_path)
            if client_secret_path
            else self.client_secret_path
        )

        self.config_data: Dict[str, Any] = {}
        for k in CONFIG_SCHEMA.keys():
            self.config_data[k] = {}

        self.client_secret_data: Dict[str, Any] = {}

        self.init_data()

    def __getitem__(self, key: str) -> Any:
        """Retrieve a metadata value using dictionary-style access.

        Raises:
            KeyError: If key is not in METADATA_KEYS.
        """
        if key not in METADATA_KEYS:
            raise KeyError(f'Invalid metadata key: {key}, must be one of {METADATA_KEYS}')

        _type = CONFIG_SCHEMA['metadata']['item_schema'][key]['type']
        v = self.config_data.get('metadata', {}).get(key)
        if not isinstance(v, _type):
            logging.error(f'Metadata key "{key}" is not of type {_type}, got {type(v)}.')
            return None
        return v

    def init_data(self) -> None:
        """Reload config and client_secret data from disk."""
        self.load_config()
        self.load_client_secret()

    def load_config(self) -> Dict[str, Any]:
        """Load timesheet.json from disk and validate against schema.

        Raises:
            status.ConfigNotFoundException: If timesheet.json is missing.
            status.ConfigInvalidException: If JSON parsing or validation fails.
        """
        logging.debug(f'Loading config from "{self.config_path}"')
        if not self.config_path.exists():
            raise status.ConfigNotFoundException

        try:
            with self.config_path.open('r', encoding='utf-8') as f:
                data: Dict[str, Any] = json.load(f)
            self.validate_config_data(data=data)
        except status.ConfigInvalidException:
            raise
        except (ValueError, TypeError) as ex:
            raise status.ConfigInvalidException(str(ex)) from ex

        self.config_data = data
        return self.config_data

    def load_client_secret(self) -> Dict[str, Any]:
        """Load client_secret.json from disk and validate required OAuth fields.

        Raises:
            status.ClientSecretNotFoundException: If client_secret.json is missing.
            status.ClientSecretInvalidException: If the JSON cannot be parsed.
        """
        logging.debug(f'Loading client_secret from "{self.client_secret_path}"')
        if not self.client_secret_path.exists():
            raise status.ClientSecretNotFoundException(str(self.client_secret_path))
        try:
            with self.client_secret_path.open('r', encoding='utf-8') as f:
                data: Dict[str, Any] = json.load(f)
        except ValueError as ex:
            raise status.ClientSecretInvalidException from ex

        self.client_secret_data = data
        return self.client_secret_data

    def validate_client_secret(self, data=None) -> str:
        """Validate that the client configuration contains required OAuth credentials.

        Args:
            data (dict, optional): Client secret data to validate. Defaults to loaded client_secret_data.

        Returns:
            str: Section key used ('installed' or 'web').

        Raises:
            status.ClientSecretInvalidException: If no valid section exists or required fields are missing.
        """
        if data is None:
            data = self.client_secret_data

        key = next((k for k in ('installed', 'web') if k in data), None)
        if not key:
            raise status.ClientSecretInvalidException('Missing "installed" or "web" section in client_secret.')

        logging.debug(f'Found "{key}" section in client_secret.')

        config_section: Dict[str, Any] = data[key]
        missing: List[str] = [k for k in self.required_client_secret_keys if k not in config_section]
        if missing:
            raise status.ClientSecretInvalidException(
                f'Missing required fields in the \'{key}\' section: {missing}.'
            )
        return key

    def validate_config_data(self, data: Dict[str, Any] = None) -> None:
        """Validate config data against CONFIG_SCHEMA.

        Raises:
            RuntimeError: If data is empty.
            status.ConfigInvalidException: If a required section is missing or has the wrong type.
            TypeError, ValueError: If a field inside a section is invalid.
        """
        if data is None:
            data = self.config_data
        if not data:
            raise RuntimeError('Config data is empty.')

        logging.debug('Validating config data against schema.')
        for field, specs in CONFIG_SCHEMA.items():
            if specs.get('required') and field not in data:
                raise status.ConfigInvalidException(f'Missing required field: {field}')

            if field not in data:
                continue

            if not isinstance(data[field], specs['type']):
                raise status.ConfigInvalidException(
                    f'Field "{field}" must be {specs["type"]}, got {type(data[field])}.')

            _validate_section(field, data[field], specs['item_schema'])

        logging.debug('Config data is valid.')

    @property
    def spreadsheet_id(self) -> str:
        """The target spreadsheet id; the environment variable wins over the config file."""
        v = os.environ.get(SPREADSHEET_ID_ENV_KEY, '').strip()
        if v:
            return v
        return self.config_data.get('spreadsheet', {}).get('id', '')

    @property
    def client_id(self) -> str:
        """The OAuth client id; the environment variable wins over client_secret.json."""
        v = os.environ.get(CLIENT_ID_ENV_KEY, '').strip()
        if v:
            return v
        key = next((k for k in ('installed', 'web') if k in self.client_secret_data), None)
        if not key:
            return ''
        return self.client_secret_data[key].get('client_id', '')

    @property
    def auth_strategy(self):
        from ..core.auth import AuthStrategy
        return AuthStrategy(self.config_data['auth']['strategy'])

    @property
    def weekday_source(self):
        from ..core.entry import WeekdaySource
        return WeekdaySource(self.config_data['metadata']['weekday_source'])

    def get_client_config(self) -> Dict[str, Any]:
        """Return the validated OAuth client configuration with the client id override applied.

        Raises:
            status.ClientSecretNotFoundException: If client_secret.json is missing.
            status.ClientSecretInvalidException: If the client configuration is invalid.
        """
        if not self.client_secret_path.exists():
            raise status.ClientSecretNotFoundException(str(self.client_secret_path))

        key = self.validate_client_secret()
        data = json.loads(json.dumps(self.client_secret_data))
        data[key]['client_id'] = self.client_id

        if not data[key]['client_id']:
            raise status.ClientSecretInvalidException('The client id is empty.')
        return data


settings: SettingsAPI = SettingsAPI()
