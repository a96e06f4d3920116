from orcid_login.strategies import orcid

# strategy type -> module with a register(registry, config, provisioner, name)
strategy_modules = {
    orcid.PROVIDER_NAME: orcid,
}
