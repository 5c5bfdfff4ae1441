"""Servicio de clasificación de fallas para instalaciones fotovoltaicas.

Subpaquetes:
- common: configuración y engine de BD
- classification: agregación, reglas, distribución y severidad (puro, sin I/O)
- repository: persistencia de predicciones, historial y estado del sistema
- pipeline: validación de requests y orquestación (PredictionRecorder)
- api: aplicación FastAPI
"""
