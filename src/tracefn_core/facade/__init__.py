from tracefn_core.facade.tracefn import TraceFn as TraceFn
