"""
Configuration Management Module

Provides centralized configuration using pydantic-settings for environment-based configuration.
"""

from pydantic_settings import BaseSettings
from typing import Optional


class TellerConfig(BaseSettings):
    """Teller configuration: ledger limits, loan rates and logging"""
    
    # Logging configuration
    log_level: str = "WARNING"
    log_format: str = "json"  # json or text
    log_file: Optional[str] = None  # If None, logs to stderr
    
    # Display configuration
    currency: str = "INR"  # ISO code, see teller.currency.Currency
    
    # Ledger limits (Decimal strings)
    min_deposit: str = "1.00"
    max_deposit: str = "1000000.00"
    min_withdrawal: str = "1.00"
    max_balance: str = "100000000.00"
    
    # Loan configuration
    min_loan_amount: str = "10000.00"
    max_loan_amount: str = "50000000.00"
    min_tenure_years: int = 1
    max_tenure_years: int = 30
    home_loan_rate: str = "8.5"  # Annual percent
    gold_loan_rate: str = "6.5"  # Annual percent
    
    # Account holder validation
    min_name_length: int = 2
    max_name_length: int = 100
    min_address_length: int = 5
    max_address_length: int = 200
    mobile_number_length: int = 10
    
    class Config:
        env_prefix = "TELLER_"
        env_file = ".env"
        case_sensitive = False


# Global configuration instance
config = TellerConfig()


def get_config() -> TellerConfig:
    """Get global configuration instance"""
    return config


def reload_config() -> TellerConfig:
    """Reload configuration from environment"""
    global config
    config = TellerConfig()
    return config
