# Databricks notebook source
# MAGIC %md-sandbox
# MAGIC # Marketing Attribution What-If
# MAGIC ## Run a Scenario
# MAGIC
# MAGIC This notebook runs the attribution simulator for the default scenario in the config file and compares attribution models side by side.

# COMMAND ----------

# MAGIC %pip install uv

# COMMAND ----------

# MAGIC %sh uv pip install .
# MAGIC %restart_python

# COMMAND ----------

# MAGIC %md
# MAGIC ### Global Config

# COMMAND ----------

CONFIG_PATH = "example_config.yaml"
import logging

from attribution_sim import AttributionModel, Channel, load_config, run_scenario, run_scenario_grid
from attribution_sim.scenario import spend_response_curve

logging.basicConfig(level=logging.INFO)

# COMMAND ----------

# MAGIC %md
# MAGIC ## Step 1: Load Configuration
# MAGIC
# MAGIC The `simulator` section defines:
# MAGIC - **Default spend** per channel (Meta, Google Search, LinkedIn)
# MAGIC - **Assumptions**: attribution model, conversion window, saturation and noise levels
# MAGIC - **Spend ranges** used for response curves

# COMMAND ----------

config = load_config(CONFIG_PATH)
sim_input = config.default_input()
print(sim_input)

# COMMAND ----------

# MAGIC %md
# MAGIC ## Step 2: Run the Scenario

# COMMAND ----------

result = run_scenario(sim_input, week_count=config.week_count)

print(f"Blended ROAS: {result.summary.blended_roas:.2f}")
print(f"Blended CAC: ${result.summary.blended_cac:,.0f}")
print(f"Modeled revenue: ${result.summary.total_revenue:,.0f}")

# COMMAND ----------

print(result.channel_frame())
print(result.budget_frame())
print(result.weekly_frame())
print(result.cohort_frame())

# COMMAND ----------

# MAGIC %md
# MAGIC ## Step 3: Compare Attribution Models

# COMMAND ----------

grid = run_scenario_grid(sim_input, models=list(AttributionModel))
print(grid)

# COMMAND ----------

# MAGIC %md
# MAGIC ## Step 4: LinkedIn Spend Response

# COMMAND ----------

curve = spend_response_curve(sim_input, Channel.LINKEDIN, config.spend_ranges[Channel.LINKEDIN])
print(curve.head(10))
