from .router_novel_folds import router_novel_folds
from .router_curation import router_curation
from .router_proteins import router_proteins
from .router_clusters import router_clusters
from .router_stats import router_stats
from .router_organisms import router_organisms
from .router_landscape import router_landscape

__all__ = ['router_novel_folds', 'router_curation', 'router_proteins',
           'router_clusters', 'router_stats', 'router_organisms', 'router_landscape']
