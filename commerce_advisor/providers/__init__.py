"""
Collaborator contracts and baseline implementations.

Modules
-------
base     : ForecastProvider / AnomalyProvider protocols, ProviderContractError,
           check_forecast() + check_anomalies() boundary validation.
baseline : SmoothedTrendForecaster + ZScoreAnomalyDetector - default
           collaborators used by the batch runner and CLI.
"""
